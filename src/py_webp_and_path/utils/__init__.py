"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

# 从文件助手模块导入
from .file_helpers import (
    expand_glob,
    read_text,
    remove_file,
    write_text,
)

# 从日志工具模块导入
from .logging_helpers import PipelineLogger, configure_logging, get_logger

# 从消息格式化模块导入
from .message_formatter import MessageFormatter


__all__ = [
    "MessageFormatter",
    "PipelineLogger",
    "configure_logging",
    "expand_glob",
    "get_logger",
    "read_text",
    "remove_file",
    "write_text",
]
