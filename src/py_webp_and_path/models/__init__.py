"""数据模型包。

定义插件选项、模式集合和流水线结果的数据结构。
"""

from .constants import (
    EXCLUDE_MARKER,
    ImageFormats,
    get_extension,
    normalize_exclude_dir,
)
from .pipeline_result import (
    ConversionResult,
    PatternSet,
    PhaseOutcome,
    PipelineResult,
    PipelineStage,
)
from .plugin_options import PluginOptions


__all__ = [
    "EXCLUDE_MARKER",
    "ConversionResult",
    "ImageFormats",
    "PatternSet",
    "PhaseOutcome",
    "PipelineResult",
    "PipelineStage",
    "PluginOptions",
    "get_extension",
    "normalize_exclude_dir",
]
