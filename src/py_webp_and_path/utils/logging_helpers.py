"""日志工具模块。

提供统一的日志记录功能，标准化日志格式和配置，以及流水线使用的日志输出端。
"""

import inspect
import logging
from logging.handlers import RotatingFileHandler

from ..config import get_config


def get_logger(name: str | None = None) -> logging.Logger:
    """获取标准化配置的日志记录器。

    Args:
        name: 日志记录器名称，默认使用调用模块的 __name__

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    if name is None:
        # 获取调用者的模块名
        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")
        else:
            name = "unknown"

    return logging.getLogger(name)


def configure_logging(level: str | None = None) -> None:
    """按默认配置初始化根日志记录器。

    根日志记录器已有处理器时不做任何改动，可重复调用。
    """
    root = logging.getLogger()
    if root.handlers:
        return

    defaults = get_config().logging
    logging.basicConfig(
        level=(level or defaults.LOG_LEVEL).upper(),
        format=defaults.LOG_FORMAT,
    )

    if defaults.ENABLE_FILE_LOGGING:
        file_handler = RotatingFileHandler(
            defaults.LOG_FILE_PATH,
            maxBytes=defaults.LOG_FILE_MAX_SIZE,
            backupCount=defaults.LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(defaults.LOG_FORMAT))
        root.addHandler(file_handler)


class PipelineLogger:
    """流水线日志输出端

    按 info / success / error 三种类型输出消息，禁用时不产生任何输出。
    """

    SUCCESS_PREFIX = "✅ "
    ERROR_PREFIX = "❌ "

    def __init__(self, enabled: bool = True, logger: logging.Logger | None = None):
        self.enabled = enabled
        self.logger = logger or logging.getLogger("py_webp_and_path")

    def info(self, message: str) -> None:
        if self.enabled:
            self.logger.info(message)

    def success(self, message: str) -> None:
        if self.enabled:
            self.logger.info(f"{self.SUCCESS_PREFIX}{message}")

    def error(self, message: str) -> None:
        if self.enabled:
            self.logger.error(f"{self.ERROR_PREFIX}{message}")
