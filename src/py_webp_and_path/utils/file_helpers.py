"""文件操作工具模块。

以异步方式包装阻塞的文件系统操作，调用方逐个 await，保证同一时刻只有一个操作访问文件系统。
"""

import asyncio
import glob
import os
from pathlib import Path


def _read_text(path: Path) -> str:
    # newline="" 和 surrogateescape 保证原始字节可以原样写回
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def _write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(content)


def _glob(pattern: str) -> list[str]:
    return [
        match
        for match in sorted(glob.glob(pattern, recursive=True))
        if os.path.isfile(match)
    ]


async def read_text(path: Path) -> str:
    """读取文本文件全部内容"""
    return await asyncio.to_thread(_read_text, path)


async def write_text(path: Path, content: str) -> None:
    """覆盖写入文本文件"""
    await asyncio.to_thread(_write_text, path, content)


async def remove_file(path: Path) -> None:
    """删除文件"""
    await asyncio.to_thread(path.unlink)


async def expand_glob(pattern: str) -> list[str]:
    """展开单个 glob 模式，结果按路径排序

    Args:
        pattern: 支持 ** 递归匹配的 glob 模式

    Returns:
        list[str]: 匹配到的普通文件路径（目标目录不存在时为空列表）
    """
    return await asyncio.to_thread(_glob, pattern)
