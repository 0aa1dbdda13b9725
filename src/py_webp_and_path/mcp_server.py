"""图片转换与路径替换 MCP 服务器。

把流水线暴露为 MCP 工具，便于在构建脚本或助手中直接调用。
"""

import logging
from typing import Any

from fastmcp import FastMCP
from pydantic import ValidationError as PydanticValidationError

from .core.patterns import build_glob_patterns
from .core.resolver import resolve_files
from .engine.pipeline import WebpPathPipeline
from .exceptions import WebpPathError
from .models import PipelineResult, PluginOptions
from .utils.logging_helpers import configure_logging
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPPipelineResponse = dict[str, Any]
MCPPreviewResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        """构建处理错误结果。"""
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )


logger = logging.getLogger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("图片转换与路径替换服务")


def _build_options(**kwargs: Any) -> PluginOptions:
    """构建插件选项，去掉未指定的参数以使用默认值"""
    return PluginOptions(**{k: v for k, v in kwargs.items() if v is not None})


def _validation_response(error: PydanticValidationError) -> dict[str, Any]:
    first = error.errors()[0]
    field = ".".join(str(loc) for loc in first["loc"]) or None
    message = MessageFormatter.validation_error(
        field or "options", first.get("input"), first["msg"]
    )
    return MCPResponseBuilder.validation_error(message, field)


def _format_pipeline_result(result: PipelineResult) -> dict[str, Any]:
    """格式化流水线结果为MCP响应格式"""
    return {
        "stage": result.stage.value,
        "last_completed_stage": result.last_completed_stage.value,
        "image_files": [str(f) for f in result.image_files],
        "text_files": [str(f) for f in result.text_files],
        "converted": [
            {
                "input_path": str(c.input_path),
                "output_path": str(c.output_path),
                "original_size": c.original_size,
                "converted_size": c.converted_size,
                "compression_ratio": c.get_compression_ratio(),
                "summary": c.get_summary(),
            }
            for c in result.conversions
        ],
        "deleted_files": [str(f) for f in result.deleted_files],
        "rewritten_files": [str(f) for f in result.rewritten_files],
        "total_size_saved": result.get_total_size_saved(),
        "summary": result.get_summary(),
    }


async def run_convert_and_rewrite(
    target_dir: str | None = None,
    exclude_dirs: list[str] | None = None,
    img_extensions: str | None = None,
    text_extensions: str | None = None,
    quality: int | None = None,
    target_format: str | None = None,
) -> MCPPipelineResponse:
    """执行流水线并返回 MCP 响应"""
    try:
        options = _build_options(
            target_dir=target_dir,
            exclude_dirs=exclude_dirs,
            img_extensions=img_extensions,
            text_extensions=text_extensions,
            quality=quality,
            target_format=target_format,
        )
    except PydanticValidationError as e:
        logger.error(MessageFormatter.operation_failed("参数验证", target_dir or "", e))
        return _validation_response(e)

    result = await WebpPathPipeline(options).run()
    return {
        "success": result.success,
        "result": _format_pipeline_result(result),
        "error": result.error,
    }


async def run_preview_targets(
    target_dir: str | None = None,
    exclude_dirs: list[str] | None = None,
    img_extensions: str | None = None,
    text_extensions: str | None = None,
) -> MCPPreviewResponse:
    """只解析目标文件，不做任何修改"""
    try:
        options = _build_options(
            target_dir=target_dir,
            exclude_dirs=exclude_dirs,
            img_extensions=img_extensions,
            text_extensions=text_extensions,
        )
    except PydanticValidationError as e:
        return _validation_response(e)

    try:
        image_patterns = build_glob_patterns(
            options.target_dir, options.img_extensions, options.exclude_dirs
        )
        text_patterns = build_glob_patterns(
            options.target_dir, options.text_extensions, options.exclude_dirs
        )
        image_files = await resolve_files(image_patterns)
        text_files = await resolve_files(text_patterns)
    except (OSError, WebpPathError) as e:
        logger.error(
            MessageFormatter.operation_failed("解析文件", options.target_dir, e)
        )
        return MCPResponseBuilder.processing_error(str(e), "解析文件")

    return {
        "success": True,
        "target_dir": str(options.target_dir),
        "image_patterns": image_patterns.patterns,
        "text_patterns": text_patterns.patterns,
        "image_files": [str(f) for f in image_files],
        "text_files": [str(f) for f in text_files],
        "error": None,
    }


# ============================================================================
# 🎯 核心工具
# ============================================================================


@mcp.tool()
async def convert_and_rewrite(
    target_dir: str | None = None,
    exclude_dirs: list[str] | None = None,
    img_extensions: str | None = None,
    text_extensions: str | None = None,
    quality: int | None = None,
    target_format: str | None = None,
) -> MCPPipelineResponse:
    """🎯 把构建目录中的图片转换为 WebP，删除原图，并替换文本中的图片引用

    Args:
        target_dir: 构建输出目录（默认 ./dist/）
        exclude_dirs: 排除的子目录（相对于 target_dir）
        img_extensions: 图片扩展名，逗号分隔（默认 "jpg,png"）
        text_extensions: 文本扩展名，逗号分隔（默认 "html,css"）
        quality: 压缩质量 0-100（默认 80）
        target_format: 目标格式 WEBP/AVIF（默认 WEBP）

    Returns:
        dict: 运行结果，失败时包含错误信息和失败前完成的阶段
    """
    return await run_convert_and_rewrite(
        target_dir=target_dir,
        exclude_dirs=exclude_dirs,
        img_extensions=img_extensions,
        text_extensions=text_extensions,
        quality=quality,
        target_format=target_format,
    )


@mcp.tool()
async def preview_targets(
    target_dir: str | None = None,
    exclude_dirs: list[str] | None = None,
    img_extensions: str | None = None,
    text_extensions: str | None = None,
) -> MCPPreviewResponse:
    """📊 预览会被处理的图片和文本文件，不修改任何文件"""
    return await run_preview_targets(
        target_dir=target_dir,
        exclude_dirs=exclude_dirs,
        img_extensions=img_extensions,
        text_extensions=text_extensions,
    )


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    configure_logging()
    logger.info("启动图片转换与路径替换 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
