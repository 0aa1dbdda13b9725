"""测试配置文件。

提供测试所需的fixtures和配置。
"""

from pathlib import Path

import pytest
from PIL import Image, ImageDraw

from py_webp_and_path.config import reset_config
from py_webp_and_path.exceptions import ConversionError
from py_webp_and_path.utils.logging_helpers import PipelineLogger


def make_image(path: Path, fmt: str = "JPEG", mode: str = "RGB") -> Path:
    """创建测试图片"""
    path.parent.mkdir(parents=True, exist_ok=True)
    if mode == "P":
        img = Image.new("P", (40, 30), color=0)
        img.info["transparency"] = 0
        draw = ImageDraw.Draw(img)
        draw.rectangle([5, 5, 20, 20], fill=1)
        img.save(path, fmt, transparency=0)
        return path

    img = Image.new(mode, (40, 30), color="white")
    draw = ImageDraw.Draw(img)
    for i in range(5):
        draw.rectangle([i * 8, i * 6, i * 8 + 6, i * 6 + 4], fill=(i * 50, 80, 200))
    img.save(path, fmt)
    return path


class RecordingSink(PipelineLogger):
    """记录所有输出消息的日志输出端"""

    def __init__(self):
        super().__init__(enabled=True)
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of_kind(self, kind: str) -> list[str]:
        return [m for k, m in self.messages if k == kind]


class FailingCompressor:
    """每次调用都失败的压缩器"""

    def __init__(self):
        self.calls: list[Path] = []

    def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        self.calls.append(input_path)
        raise ConversionError("压缩器故障", input_path)


class CopyingCompressor:
    """把原文件内容复制为 .webp 的压缩器，不依赖图片编码"""

    def __init__(self):
        self.calls: list[tuple[Path, Path, int]] = []

    def compress(self, input_path: Path, output_dir: Path, quality: int) -> Path:
        self.calls.append((input_path, output_dir, quality))
        output = output_dir / f"{input_path.stem}.webp"
        output.write_bytes(input_path.read_bytes())
        return output


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """每个测试使用不受环境变量影响的全局配置"""
    for name in (
        "WAP_TARGET_DIR",
        "WAP_IMG_EXTENSIONS",
        "WAP_TEXT_EXTENSIONS",
        "WAP_QUALITY",
        "WAP_TARGET_FORMAT",
        "WAP_ENABLE_LOGS",
        "WAP_LOG_LEVEL",
        "WAP_ENABLE_FILE_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """典型的构建输出目录

    dist/
      a.jpg
      img/b.png
      vendor/c.jpg
      index.html
      css/style.css
      vendor/lib.css
    """
    dist = tmp_path / "dist"
    make_image(dist / "a.jpg", "JPEG")
    make_image(dist / "img" / "b.png", "PNG")
    make_image(dist / "vendor" / "c.jpg", "JPEG")

    (dist / "index.html").write_text(
        '<img src="a.jpg"><img src="img/b.png"><img src="a.jpg">\n',
        encoding="utf-8",
    )
    (dist / "css").mkdir()
    (dist / "css" / "style.css").write_text(
        ".hero { background: url(../img/b.png); }\n", encoding="utf-8"
    )
    (dist / "vendor" / "lib.css").write_text(
        ".icon { background: url(c.jpg); }\n", encoding="utf-8"
    )
    return dist


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
