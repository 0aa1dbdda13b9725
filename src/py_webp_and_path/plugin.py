"""构建插件接口。

构建工具写完产物后调用 write_bundle()，把图片转换为 WebP 并替换文本中的引用。
"""

import asyncio
from typing import Any

from .core.converter import Compressor
from .engine.pipeline import WebpPathPipeline
from .models import PipelineResult, PluginOptions
from .utils.logging_helpers import PipelineLogger, configure_logging, get_logger


logger = get_logger()


class WebpAndPathPlugin:
    """图片转换与路径替换插件

    选项在创建时确定，之后每次构建都调用一次 write_bundle()。
    插件本身不配置 logging，日志输出方式由调用方决定。
    """

    name = "py-webp-and-path"

    def __init__(
        self,
        options: PluginOptions | None = None,
        compressor: Compressor | None = None,
        sink: PipelineLogger | None = None,
    ):
        """初始化插件。

        Args:
            options: 插件选项，None 时使用默认值
            compressor: 自定义压缩器，None 时使用 Pillow
            sink: 自定义日志输出端
        """
        self.options = options or PluginOptions()
        self.compressor = compressor
        self.sink = sink

        logger.debug(f"初始化插件: {self.options}")

    async def write_bundle(self) -> PipelineResult:
        """构建产物写入磁盘后的钩子

        失败不会抛出异常，错误记录在返回的结果中。
        """
        pipeline = WebpPathPipeline(
            self.options, compressor=self.compressor, sink=self.sink
        )
        return await pipeline.run()


def webp_and_path(**options: Any) -> WebpAndPathPlugin:
    """创建插件

    Examples:
        >>> plugin = webp_and_path(target_dir="./dist/", exclude_dirs=["vendor"])
        >>> result = asyncio.run(plugin.write_bundle())
    """
    return WebpAndPathPlugin(PluginOptions(**options))


def run_pipeline(**options: Any) -> PipelineResult:
    """同步执行一次流水线（便捷函数）

    Args:
        **options: PluginOptions 字段，包括：
            - target_dir: 构建输出目录
            - exclude_dirs: 排除目录
            - img_extensions: 图片扩展名，如 "jpg,png"
            - text_extensions: 文本扩展名，如 "html,css"
            - quality: 压缩质量
            - enable_logs: 是否输出日志
            - target_format: 目标格式 WEBP/AVIF

    Returns:
        PipelineResult: 运行结果
    """
    plugin = webp_and_path(**options)
    if plugin.options.enable_logs:
        configure_logging()
    return asyncio.run(plugin.write_bundle())
