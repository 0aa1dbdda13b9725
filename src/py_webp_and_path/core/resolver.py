"""文件解析模块。

把模式集合展开为去重后的文件列表。
"""

import os
from pathlib import Path

from ..models.pipeline_result import PatternSet
from ..utils.file_helpers import expand_glob
from ..utils.logging_helpers import get_logger


logger = get_logger()


async def resolve_files(pattern_set: PatternSet) -> list[Path]:
    """解析模式集合

    返回被任一包含模式匹配、且未被任何排除模式匹配的文件，按包含模式顺序排列，
    重复项只保留第一次出现。目标目录不存在或没有匹配时返回空列表。

    Args:
        pattern_set: 模式集合

    Returns:
        list[Path]: 文件路径列表
    """
    excluded: set[str] = set()
    for pattern in pattern_set.negative:
        matches = await expand_glob(pattern)
        excluded.update(os.path.normpath(match) for match in matches)

    seen: set[str] = set()
    files: list[Path] = []
    for pattern in pattern_set.positive:
        for match in await expand_glob(pattern):
            key = os.path.normpath(match)
            if key in excluded or key in seen:
                continue
            seen.add(key)
            files.append(Path(key))

    logger.debug(f"模式 {pattern_set.patterns} 匹配到 {len(files)} 个文件")
    return files
