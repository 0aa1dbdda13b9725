"""构建后图片转换与路径替换工具。

把构建产物中的图片转换为 WebP，删除原图，并替换 HTML/CSS 中的图片引用。
"""

__version__ = "0.1.0"
__author__ = "crper"
__description__ = "构建后图片 WebP 转换与路径替换，基于 Pillow 11"

# 核心功能导出
from .engine.pipeline import WebpPathPipeline
from .models import PipelineResult, PipelineStage, PluginOptions
from .plugin import WebpAndPathPlugin, run_pipeline, webp_and_path


__all__ = [
    "PipelineResult",
    "PipelineStage",
    "PluginOptions",
    "WebpAndPathPlugin",
    "WebpPathPipeline",
    "get_version",
    "run_pipeline",
    "webp_and_path",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
