"""转换相关常量定义。

基于 Pillow 动态能力的目标格式管理，避免硬编码重复。
"""

import os
from typing import Final

from PIL import Image


# glob 模式前缀，表示从结果中排除匹配项
EXCLUDE_MARKER: Final[str] = "!"


def normalize_exclude_dir(exclude_dir: str) -> str | None:
    """把排除目录规范化为目标目录下的相对路径

    开头的路径分隔符会被去掉，"/vendor" 与 "vendor" 等价。

    Returns:
        str | None: 规范化后的相对路径，指向目标目录之外时为 None
    """
    fragment = os.path.normpath(exclude_dir.lstrip("/\\") or ".")
    if fragment == os.pardir or fragment.startswith(os.pardir + os.sep):
        return None
    if os.path.isabs(fragment) or os.path.splitdrive(fragment)[0]:
        return None
    return fragment


class ImageFormats:
    """基于 Pillow 的目标格式管理"""

    # 本工具能够编码的目标格式
    CONVERTIBLE_FORMATS: Final[tuple[str, ...]] = ("WEBP", "AVIF")

    # 首选扩展名（不含点号）
    PREFERRED_EXTENSIONS: Final[dict[str, str]] = {
        "WEBP": "webp",
        "AVIF": "avif",
    }

    @classmethod
    def get_supported_formats(cls) -> set[str]:
        """动态获取 Pillow 支持的所有格式"""
        return {fmt.upper() for fmt in Image.registered_extensions().values() if fmt}

    @classmethod
    def is_convertible(cls, format_name: str) -> bool:
        """目标格式是否可用（本工具支持且 Pillow 已注册）"""
        format_upper = format_name.upper()
        return (
            format_upper in cls.CONVERTIBLE_FORMATS
            and format_upper in cls.get_supported_formats()
        )

    @classmethod
    def get_extension(cls, format_name: str) -> str:
        """获取格式对应的扩展名（不含点号）"""
        format_upper = format_name.upper()
        if format_upper in cls.PREFERRED_EXTENSIONS:
            return cls.PREFERRED_EXTENSIONS[format_upper]

        for ext, fmt in Image.registered_extensions().items():
            if fmt and fmt.upper() == format_upper:
                return ext.lstrip(".").lower()

        return format_name.lower()


def get_extension(format_name: str) -> str:
    """获取格式对应的扩展名（便捷函数）"""
    return ImageFormats.get_extension(format_name)
