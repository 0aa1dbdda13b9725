"""流水线结果模型。

定义图片转换、路径替换各阶段的结果数据结构。
"""

from enum import Enum
from pathlib import Path

from humanize import naturalsize
from pydantic import BaseModel, Field

from .constants import EXCLUDE_MARKER


class PipelineStage(str, Enum):
    """流水线状态

    按定义顺序线性推进，任一阶段出错进入 FAILED。
    """

    IDLE = "idle"
    PATTERNS_BUILT = "patterns_built"
    IMAGES_RESOLVED = "images_resolved"
    IMAGES_CONVERTED = "images_converted"
    ORIGINALS_DELETED = "originals_deleted"
    TEXT_RESOLVED = "text_resolved"
    TEXT_REWRITTEN = "text_rewritten"
    DONE = "done"
    FAILED = "failed"


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class PatternSet(BaseModel):
    """glob 模式集合

    以 "!" 开头的模式表示从结果中排除匹配项。
    """

    patterns: list[str] = Field(default_factory=list, description="有序的模式列表")

    @property
    def positive(self) -> list[str]:
        """包含模式"""
        return [p for p in self.patterns if not p.startswith(EXCLUDE_MARKER)]

    @property
    def negative(self) -> list[str]:
        """排除模式（已去掉前缀）"""
        return [
            p[len(EXCLUDE_MARKER) :]
            for p in self.patterns
            if p.startswith(EXCLUDE_MARKER)
        ]


class ConversionResult(BaseResult):
    """单个图片转换结果"""

    success: bool = True
    input_path: Path = Field(description="原始图片路径")
    output_path: Path = Field(description="转换后图片路径")
    original_size: int = Field(description="原始文件大小（字节）")
    converted_size: int = Field(description="转换后文件大小（字节）")
    format_used: str = Field(description="使用的格式")
    quality_used: int = Field(description="使用的质量值")

    def get_size_saved(self) -> int:
        """节省的字节数"""
        return max(0, self.original_size - self.converted_size)

    def get_compression_ratio(self) -> float:
        """压缩比例（百分比）"""
        if self.original_size == 0:
            return 0.0
        return (self.get_size_saved() / self.original_size) * 100

    def get_summary(self) -> str:
        """转换结果摘要"""
        return (
            f"{self.format_size(self.original_size)} → "
            f"{self.format_size(self.converted_size)}"
        )


class PhaseOutcome(BaseResult):
    """单个阶段的执行结果"""

    stage: PipelineStage = Field(description="阶段完成后到达的状态")
    files: list[Path] = Field(default_factory=list, description="本阶段处理的文件")


class PipelineResult(BaseResult):
    """一次流水线运行的结果"""

    success: bool = False
    stage: PipelineStage = Field(PipelineStage.IDLE, description="当前状态")
    last_completed_stage: PipelineStage = Field(
        PipelineStage.IDLE, description="最后成功完成的状态"
    )

    image_patterns: PatternSet = Field(default_factory=PatternSet)
    text_patterns: PatternSet = Field(default_factory=PatternSet)
    image_files: list[Path] = Field(default_factory=list)
    text_files: list[Path] = Field(default_factory=list)

    conversions: list[ConversionResult] = Field(default_factory=list)
    deleted_files: list[Path] = Field(default_factory=list)
    rewritten_files: list[Path] = Field(default_factory=list)

    phases: list[PhaseOutcome] = Field(default_factory=list)

    def reached(self, stage: PipelineStage) -> bool:
        """流水线是否成功完成了指定阶段"""
        return any(p.success and p.stage == stage for p in self.phases)

    def get_total_size_saved(self) -> int:
        """总节省大小"""
        return sum(c.get_size_saved() for c in self.conversions)

    def get_summary(self) -> str:
        """运行摘要"""
        if not self.success:
            return f"处理失败 ({self.last_completed_stage.value}): {self.error}"

        return (
            f"转换 {len(self.conversions)} 张图片, "
            f"替换 {len(self.rewritten_files)} 个文件, "
            f"总节省 {self.format_size(self.get_total_size_saved())}"
        )
