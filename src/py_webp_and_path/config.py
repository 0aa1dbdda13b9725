"""统一配置管理模块。

提供插件的全局默认配置，支持环境变量覆盖。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PluginDefaults:
    """插件选项的默认配置"""

    # 构建输出目录
    TARGET_DIR: str = "./dist/"

    # 扩展名（逗号分隔）
    IMG_EXTENSIONS: str = "jpg,png"
    TEXT_EXTENSIONS: str = "html,css"

    # 转换设置
    QUALITY: int = 80
    TARGET_FORMAT: str = "WEBP"

    ENABLE_LOGS: bool = True


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    # 日志级别
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # 文件日志
    ENABLE_FILE_LOGGING: bool = False
    LOG_FILE_PATH: str = "py_webp_and_path.log"
    LOG_FILE_MAX_SIZE: int = 10 * 1024 * 1024  # 10MB
    LOG_FILE_BACKUP_COUNT: int = 5


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    ENV_PREFIX = "WAP_"

    def __init__(self):
        self.plugin = PluginDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _getenv(self, name: str) -> str | None:
        return os.getenv(f"{self.ENV_PREFIX}{name}")

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 插件配置
        if target_dir := self._getenv("TARGET_DIR"):
            object.__setattr__(self.plugin, "TARGET_DIR", target_dir)

        if img_extensions := self._getenv("IMG_EXTENSIONS"):
            object.__setattr__(self.plugin, "IMG_EXTENSIONS", img_extensions)

        if text_extensions := self._getenv("TEXT_EXTENSIONS"):
            object.__setattr__(self.plugin, "TEXT_EXTENSIONS", text_extensions)

        if quality := self._getenv("QUALITY"):
            object.__setattr__(self.plugin, "QUALITY", int(quality))

        if target_format := self._getenv("TARGET_FORMAT"):
            object.__setattr__(self.plugin, "TARGET_FORMAT", target_format.upper())

        if enable_logs := self._getenv("ENABLE_LOGS"):
            object.__setattr__(self.plugin, "ENABLE_LOGS", _parse_bool(enable_logs))

        # 日志配置
        if log_level := self._getenv("LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())

        if enable_file_log := self._getenv("ENABLE_FILE_LOGGING"):
            object.__setattr__(
                self.logging, "ENABLE_FILE_LOGGING", _parse_bool(enable_file_log)
            )


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
