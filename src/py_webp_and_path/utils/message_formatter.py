"""消息格式化工具模块。

提供统一的错误消息、成功消息格式化功能。
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    # 流水线进度消息

    @staticmethod
    def target_images(files: Sequence[Path]) -> str:
        return f"目标图片: {', '.join(str(f) for f in files)}"

    @staticmethod
    def no_files_matched(kind: str, target_dir: str | Path) -> str:
        return f"未找到{kind}: {target_dir}"

    @staticmethod
    def image_converted(file_path: str | Path, summary: str | None = None) -> str:
        msg = f"已转换: {file_path}"
        if summary:
            msg += f" ({summary})"
        return msg

    @staticmethod
    def all_images_converted(target_format: str) -> str:
        return f"所有图片已转换为 {target_format.lower()}!"

    @staticmethod
    def all_originals_deleted() -> str:
        return "所有原始图片已删除。"

    @staticmethod
    def paths_rewritten(file_path: str | Path) -> str:
        return f"已替换图片路径: {file_path}"

    @staticmethod
    def all_paths_rewritten() -> str:
        return "所有图片路径已替换!"

    @staticmethod
    def pipeline_failed(error: str | None) -> str:
        return f"错误: {error}"
