"""glob 模式构建模块。

根据目标目录、扩展名和排除目录生成包含/排除模式集合。
"""

import glob
import os
from collections.abc import Sequence
from pathlib import Path

from ..exceptions import ValidationError
from ..models.constants import EXCLUDE_MARKER, normalize_exclude_dir
from ..models.pipeline_result import PatternSet


def _escape_dir(directory: str | Path) -> str:
    """规范化目录并转义其中的 glob 元字符"""
    return glob.escape(os.path.normpath(directory)).replace(os.sep, "/")


def _exclude_base(target_dir: str | Path, exclude_dir: str) -> str:
    """把排除目录拼接到目标目录下"""
    fragment = normalize_exclude_dir(exclude_dir)
    if fragment is None:
        raise ValidationError(f"排除目录必须位于目标目录内: {exclude_dir}")
    return _escape_dir(Path(target_dir) / fragment)


def _extension_pattern(base_dir: str, extension: str) -> str:
    return f"{base_dir}/**/*.{glob.escape(extension)}"


def build_glob_patterns(
    target_dir: str | Path,
    extensions: Sequence[str],
    exclude_dirs: Sequence[str] = (),
) -> PatternSet:
    """构建 glob 模式集合

    先按扩展名顺序生成包含模式，再按排除目录顺序为每个扩展名生成排除模式。
    重叠的模式不去重。

    Args:
        target_dir: 目标目录
        extensions: 扩展名列表（不含点号）
        exclude_dirs: 相对于目标目录的排除目录

    Returns:
        PatternSet: 有序的模式集合

    Raises:
        ValidationError: 排除目录指向目标目录之外
    """
    base_dir = _escape_dir(target_dir)
    patterns = [_extension_pattern(base_dir, ext) for ext in extensions]

    for exclude_dir in exclude_dirs:
        exclude_base = _exclude_base(target_dir, exclude_dir)
        patterns.extend(
            f"{EXCLUDE_MARKER}{_extension_pattern(exclude_base, ext)}"
            for ext in extensions
        )

    return PatternSet(patterns=patterns)
