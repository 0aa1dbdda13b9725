"""插件选项模型。

定义图片转换与路径替换的配置参数。
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config import get_config
from .constants import ImageFormats, get_extension, normalize_exclude_dir


def _split_extensions(value: Any) -> Any:
    """把逗号分隔的字符串拆成扩展名列表"""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",")]
    if isinstance(value, list | tuple):
        return [part.strip() if isinstance(part, str) else part for part in value]
    return value


class PluginOptions(BaseModel):
    """插件选项，创建后不可修改

    目标目录是否存在不在这里校验，运行时不存在只会得到空的文件列表。
    """

    # 默认值来自环境变量，同样需要校验
    model_config = ConfigDict(frozen=True, validate_default=True)

    target_dir: Path = Field(
        default_factory=lambda: Path(get_config().plugin.TARGET_DIR),
        description="构建输出目录",
    )
    exclude_dirs: list[str] = Field(
        default_factory=list, description="要排除的目录（相对于目标目录）"
    )
    img_extensions: list[str] = Field(
        default_factory=lambda: _split_extensions(get_config().plugin.IMG_EXTENSIONS),
        description="要转换的图片扩展名",
    )
    text_extensions: list[str] = Field(
        default_factory=lambda: _split_extensions(get_config().plugin.TEXT_EXTENSIONS),
        description="要替换图片路径的文本扩展名",
    )
    quality: int = Field(
        default_factory=lambda: get_config().plugin.QUALITY,
        ge=0,
        le=100,
        description="压缩质量",
    )
    enable_logs: bool = Field(
        default_factory=lambda: get_config().plugin.ENABLE_LOGS,
        description="是否输出日志",
    )
    target_format: str = Field(
        default_factory=lambda: get_config().plugin.TARGET_FORMAT,
        description="目标格式",
    )

    @field_validator("img_extensions", "text_extensions", mode="before")
    @classmethod
    def split_extensions(cls, v: Any) -> Any:
        return _split_extensions(v)

    @field_validator("img_extensions", "text_extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("扩展名列表不能为空")
        for ext in v:
            if not ext:
                raise ValueError("扩展名不能为空")
            if ext.startswith("."):
                raise ValueError(f"扩展名不能以点号开头: {ext}")
        return v

    @field_validator("exclude_dirs")
    @classmethod
    def validate_exclude_dirs(cls, v: list[str]) -> list[str]:
        for exclude_dir in v:
            if not exclude_dir.strip():
                raise ValueError("排除目录不能为空")
            if normalize_exclude_dir(exclude_dir) is None:
                raise ValueError(f"排除目录必须位于目标目录内: {exclude_dir}")
        return v

    @field_validator("target_format")
    @classmethod
    def validate_target_format(cls, v: str) -> str:
        if not ImageFormats.is_convertible(v):
            raise ValueError(
                f"不支持的目标格式: {v}，"
                f"可用格式: {list(ImageFormats.CONVERTIBLE_FORMATS)}"
            )
        return v.upper()

    @model_validator(mode="after")
    def validate_target_not_source(self) -> "PluginOptions":
        # 否则转换结果会在删除阶段被当作原图删除
        if self.target_extension in self.img_extensions:
            raise ValueError(
                f"图片扩展名不能包含目标格式扩展名: {self.target_extension}"
            )
        return self

    @property
    def target_extension(self) -> str:
        """目标格式的扩展名（不含点号）"""
        return get_extension(self.target_format)
