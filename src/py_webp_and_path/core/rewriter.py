"""文本路径替换模块。

把文本文件中的图片扩展名替换为目标格式扩展名。

替换是纯文本的，不解析标记语言：注释、字符串或其他恰好包含 ".jpg" 之类
文本的位置同样会被替换。
"""

from collections.abc import Sequence
from pathlib import Path

from ..exceptions import RewriteError
from ..utils.file_helpers import read_text, write_text
from ..utils.logging_helpers import PipelineLogger
from ..utils.message_formatter import MessageFormatter


def rewrite_content(
    content: str, img_extensions: Sequence[str], new_extension: str
) -> str:
    """替换内容中所有 ".<扩展名>" 为 ".<新扩展名>"

    区分大小写，不检查单词边界，按扩展名顺序依次替换。
    """
    for ext in img_extensions:
        content = content.replace(f".{ext}", f".{new_extension}")
    return content


class TextRewriter:
    """文本文件路径替换器"""

    def __init__(
        self,
        img_extensions: Sequence[str],
        new_extension: str,
        sink: PipelineLogger | None = None,
    ):
        self.img_extensions = list(img_extensions)
        self.new_extension = new_extension
        self.sink = sink or PipelineLogger()

    async def rewrite(self, file_path: Path) -> None:
        """读取整个文件，替换后原地写回一次"""
        try:
            content = await read_text(file_path)
        except OSError as e:
            raise RewriteError(f"读取文件失败: {e}", file_path) from e

        updated = rewrite_content(content, self.img_extensions, self.new_extension)

        try:
            await write_text(file_path, updated)
        except OSError as e:
            raise RewriteError(f"写入文件失败: {e}", file_path) from e

    async def rewrite_all(
        self,
        files: Sequence[Path],
        rewritten: list[Path] | None = None,
    ) -> list[Path]:
        """逐个替换文本文件，第一个失败直接抛出"""
        rewritten = rewritten if rewritten is not None else []
        for file in files:
            await self.rewrite(file)
            rewritten.append(file)
            self.sink.info(MessageFormatter.paths_rewritten(file))

        self.sink.success(MessageFormatter.all_paths_rewritten())
        return rewritten
