"""核心处理模块。

模式构建、文件解析、图片转换和文本路径替换。
"""

from .converter import (
    Compressor,
    ImageConverter,
    PillowCompressor,
)
from .patterns import build_glob_patterns
from .resolver import resolve_files
from .rewriter import TextRewriter, rewrite_content


__all__ = [
    "Compressor",
    "ImageConverter",
    "PillowCompressor",
    "TextRewriter",
    "build_glob_patterns",
    "resolve_files",
    "rewrite_content",
]
