"""流水线编排模块。

按固定顺序执行：构建模式 → 解析图片 → 转换图片 → 删除原图 → 解析文本 → 替换路径。
任一阶段失败后不再执行后续阶段，错误记录在结果中，不向调用方抛出。
"""

from collections.abc import Awaitable, Callable
from pathlib import Path

from ..core.converter import Compressor, ImageConverter, PillowCompressor
from ..core.patterns import build_glob_patterns
from ..core.resolver import resolve_files
from ..core.rewriter import TextRewriter
from ..exceptions import ErrorHandler
from ..models.pipeline_result import PhaseOutcome, PipelineResult, PipelineStage
from ..models.plugin_options import PluginOptions
from ..utils.logging_helpers import PipelineLogger, get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()

PhaseStep = Callable[[PipelineResult], Awaitable[list[Path]]]


class WebpPathPipeline:
    """图片转换与路径替换流水线

    每次 run() 都重新构建模式和文件列表，不在多次运行之间缓存。
    """

    def __init__(
        self,
        options: PluginOptions,
        compressor: Compressor | None = None,
        sink: PipelineLogger | None = None,
    ):
        self.options = options
        self.sink = sink or PipelineLogger(enabled=options.enable_logs)
        self.compressor = compressor or PillowCompressor(options.target_format)
        self.converter = ImageConverter(
            compressor=self.compressor,
            quality=options.quality,
            target_format=options.target_format,
            sink=self.sink,
        )
        self.rewriter = TextRewriter(
            img_extensions=options.img_extensions,
            new_extension=options.target_extension,
            sink=self.sink,
        )

    def _steps(self) -> list[tuple[PipelineStage, PhaseStep]]:
        return [
            (PipelineStage.PATTERNS_BUILT, self._build_patterns),
            (PipelineStage.IMAGES_RESOLVED, self._resolve_images),
            (PipelineStage.IMAGES_CONVERTED, self._convert_images),
            (PipelineStage.ORIGINALS_DELETED, self._delete_originals),
            (PipelineStage.TEXT_RESOLVED, self._resolve_text),
            (PipelineStage.TEXT_REWRITTEN, self._rewrite_text),
        ]

    async def run(self) -> PipelineResult:
        """执行一次完整的流水线

        Returns:
            PipelineResult: 运行结果，stage 为 DONE 或 FAILED
        """
        result = PipelineResult()

        for stage, step in self._steps():
            outcome = await self._run_phase(stage, step, result)
            result.phases.append(outcome)

            if not outcome.success:
                result.stage = PipelineStage.FAILED
                result.error = outcome.error
                self.sink.error(MessageFormatter.pipeline_failed(outcome.error))
                return result

            result.stage = stage
            result.last_completed_stage = stage

        result.stage = PipelineStage.DONE
        result.success = True
        logger.debug(result.get_summary())
        return result

    async def _run_phase(
        self, stage: PipelineStage, step: PhaseStep, result: PipelineResult
    ) -> PhaseOutcome:
        """执行单个阶段，把异常转换为失败的阶段结果"""
        try:
            files = await step(result)
        except Exception as e:
            return ErrorHandler.phase_failed(stage, e, self.options.target_dir)
        return PhaseOutcome(stage=stage, success=True, files=files)

    async def _build_patterns(self, result: PipelineResult) -> list[Path]:
        options = self.options
        result.image_patterns = build_glob_patterns(
            options.target_dir, options.img_extensions, options.exclude_dirs
        )
        # 文本模式在这里只做准备，文本文件要等图片处理完才解析
        result.text_patterns = build_glob_patterns(
            options.target_dir, options.text_extensions, options.exclude_dirs
        )
        return []

    async def _resolve_images(self, result: PipelineResult) -> list[Path]:
        result.image_files = await resolve_files(result.image_patterns)
        if result.image_files:
            self.sink.info(MessageFormatter.target_images(result.image_files))
        else:
            self.sink.info(
                MessageFormatter.no_files_matched("图片", self.options.target_dir)
            )
        return result.image_files

    async def _convert_images(self, result: PipelineResult) -> list[Path]:
        await self.converter.convert_all(result.image_files, result.conversions)
        return [c.output_path for c in result.conversions]

    async def _delete_originals(self, result: PipelineResult) -> list[Path]:
        await self.converter.delete_originals(result.image_files, result.deleted_files)
        return result.deleted_files

    async def _resolve_text(self, result: PipelineResult) -> list[Path]:
        result.text_files = await resolve_files(result.text_patterns)
        if not result.text_files:
            self.sink.info(
                MessageFormatter.no_files_matched("文本文件", self.options.target_dir)
            )
        return result.text_files

    async def _rewrite_text(self, result: PipelineResult) -> list[Path]:
        await self.rewriter.rewrite_all(result.text_files, result.rewritten_files)
        return result.rewritten_files
