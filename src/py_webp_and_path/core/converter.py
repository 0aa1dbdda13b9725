"""图片转换模块。

把匹配到的图片逐个转换为目标格式，转换全部完成后再统一删除原始图片。
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from PIL import Image, ImageOps

from ..exceptions import DeletionError, handle_image_errors
from ..models.constants import get_extension
from ..models.pipeline_result import ConversionResult
from ..utils.file_helpers import remove_file
from ..utils.logging_helpers import PipelineLogger, get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()


class Compressor(Protocol):
    """压缩器接口

    把 input_path 转换后写入 output_dir，返回新文件路径，失败时抛出异常。
    """

    def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path: ...


def prepare_for_format(img: Image.Image) -> Image.Image:
    """为 WebP/AVIF 准备图片，两者都只接受 RGB 和 RGBA"""
    if img.mode in ("RGB", "RGBA"):
        return img
    if img.mode == "P":
        # 调色板模式，检查是否有透明度
        if "transparency" in img.info:
            return img.convert("RGBA")
        return img.convert("RGB")
    if img.mode in ("LA", "PA"):
        return img.convert("RGBA")
    return img.convert("RGB")


def get_webp_params(quality: int) -> dict[str, Any]:
    """获取WebP压缩参数

    - quality控制图像质量(0=最小,100=最大)
    - method参数：0=快速，6=最慢但最佳压缩
    - alpha_quality：控制透明通道质量，100为无损
    """
    webp_quality = max(0, min(100, quality))
    params: dict[str, Any] = {
        "quality": webp_quality,
        "method": 6,
    }

    # 高质量时保持透明通道无损或接近无损
    if webp_quality >= 85:
        params["alpha_quality"] = 100
    elif webp_quality >= 70:
        params["alpha_quality"] = min(100, webp_quality + 10)
    else:
        params["alpha_quality"] = webp_quality

    return params


def get_avif_params(quality: int) -> dict[str, Any]:
    """获取AVIF压缩参数"""
    avif_quality = max(0, min(100, quality))
    params: dict[str, Any] = {"quality": avif_quality}

    # 根据质量调整速度参数 (0=最慢最佳, 10=最快)
    if avif_quality >= 90:
        params["speed"] = 2
    elif avif_quality >= 70:
        params["speed"] = 4
    else:
        params["speed"] = 6

    if avif_quality >= 95:
        params["subsampling"] = "4:4:4"
    elif avif_quality >= 80:
        params["subsampling"] = "4:2:2"
    else:
        params["subsampling"] = "4:2:0"

    return params


def get_save_parameters(format_name: str, quality: int) -> dict[str, Any]:
    match format_name:
        case "WEBP":
            return get_webp_params(quality)
        case "AVIF":
            return get_avif_params(quality)
        case _:
            return {"quality": quality}


class PillowCompressor:
    """基于 Pillow 的压缩器"""

    def __init__(self, target_format: str = "WEBP"):
        self.target_format = target_format.upper()
        self.extension = get_extension(self.target_format)

    def get_output_path(self, input_path: Path, output_dir: Path) -> Path:
        """同名、目标扩展名的输出路径"""
        return output_dir / f"{input_path.stem}.{self.extension}"

    @handle_image_errors("图片转换")
    def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        output_path = self.get_output_path(input_path, output_dir)

        with Image.open(input_path) as img:
            # 处理EXIF旋转
            processed = ImageOps.exif_transpose(img)
            processed = prepare_for_format(processed)
            processed.save(
                output_path,
                format=self.target_format,
                **get_save_parameters(self.target_format, quality),
            )

        logger.debug(f"{input_path} -> {output_path}")
        return output_path


class ImageConverter:
    """图片转换器

    严格顺序处理：一个文件转换并记录日志后才开始下一个。
    """

    def __init__(
        self,
        compressor: Compressor,
        quality: int,
        target_format: str = "WEBP",
        sink: PipelineLogger | None = None,
    ):
        self.compressor = compressor
        self.quality = quality
        self.target_format = target_format.upper()
        self.sink = sink or PipelineLogger()

    def _convert_file(self, input_path: Path) -> ConversionResult:
        original_size = input_path.stat().st_size
        output_path = self.compressor.compress(
            input_path, input_path.parent, self.quality
        )
        return ConversionResult(
            input_path=input_path,
            output_path=output_path,
            original_size=original_size,
            converted_size=output_path.stat().st_size,
            format_used=self.target_format,
            quality_used=self.quality,
        )

    async def convert(self, input_path: Path) -> ConversionResult:
        """转换单个图片，失败时抛出异常"""
        return await asyncio.to_thread(self._convert_file, input_path)

    async def convert_all(
        self,
        files: Sequence[Path],
        results: list[ConversionResult] | None = None,
    ) -> list[ConversionResult]:
        """逐个转换图片

        第一个失败会直接抛出，后续文件不再处理。

        Args:
            files: 图片文件列表
            results: 可选的结果收集列表，每完成一个文件立即追加

        Returns:
            list[ConversionResult]: 转换结果
        """
        results = results if results is not None else []
        for file in files:
            result = await self.convert(file)
            results.append(result)
            self.sink.success(
                MessageFormatter.image_converted(file, result.get_summary())
            )

        self.sink.success(MessageFormatter.all_images_converted(self.target_format))
        return results

    async def delete_originals(
        self,
        files: Sequence[Path],
        deleted: list[Path] | None = None,
    ) -> list[Path]:
        """删除原始图片

        每个文件独立尝试删除，全部尝试完后如有失败则抛出 DeletionError。
        """
        deleted = deleted if deleted is not None else []
        failures: list[tuple[Path, Exception]] = []
        for file in files:
            try:
                await remove_file(file)
            except OSError as e:
                failures.append((file, e))
                continue
            deleted.append(file)

        if failures:
            raise DeletionError(failures)

        self.sink.info(MessageFormatter.all_originals_deleted())
        return deleted
