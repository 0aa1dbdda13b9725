"""核心功能测试。

测试模式构建、文件解析、图片转换和文本替换。
"""

import asyncio
import logging
from pathlib import Path

import pytest
from PIL import Image

from py_webp_and_path.core.converter import (
    ImageConverter,
    PillowCompressor,
    get_save_parameters,
    get_webp_params,
)
from py_webp_and_path.core.patterns import build_glob_patterns
from py_webp_and_path.core.resolver import resolve_files
from py_webp_and_path.core.rewriter import TextRewriter, rewrite_content
from py_webp_and_path.exceptions import (
    ConversionError,
    DeletionError,
    ErrorHandler,
    UnsupportedFormatError,
    ValidationError,
)
from py_webp_and_path.models import PipelineStage
from tests.conftest import CopyingCompressor, make_image


class TestPatternBuilder:
    """模式构建测试"""

    def test_only_positive_patterns_without_excludes(self):
        """没有排除目录时只生成包含模式"""
        pattern_set = build_glob_patterns("dist", ["jpg", "png"], [])

        assert pattern_set.patterns == ["dist/**/*.jpg", "dist/**/*.png"]
        assert len(pattern_set.positive) == 2
        assert pattern_set.negative == []

    def test_negative_patterns_follow_exclude_order(self):
        """每个排除目录为每个扩展名生成一个排除模式，按排除目录顺序排列"""
        pattern_set = build_glob_patterns("dist", ["jpg", "png"], ["vendor", "lib"])

        assert pattern_set.patterns == [
            "dist/**/*.jpg",
            "dist/**/*.png",
            "!dist/vendor/**/*.jpg",
            "!dist/vendor/**/*.png",
            "!dist/lib/**/*.jpg",
            "!dist/lib/**/*.png",
        ]
        assert len(pattern_set.negative) == 2 * 2

    def test_target_dir_is_normalised(self):
        """./dist/ 与 dist 生成相同的模式"""
        assert (
            build_glob_patterns("./dist/", ["jpg"], ["vendor/"]).patterns
            == build_glob_patterns("dist", ["jpg"], ["vendor"]).patterns
        )

    def test_leading_separator_stays_inside_target(self):
        """开头带分隔符的排除目录仍然相对于目标目录"""
        pattern_set = build_glob_patterns("dist", ["jpg"], ["/vendor", "\\lib"])

        assert pattern_set.negative == ["dist/vendor/**/*.jpg", "dist/lib/**/*.jpg"]

    @pytest.mark.parametrize("exclude_dir", ["..", "../outside", "vendor/../.."])
    def test_exclude_dir_outside_target_rejected(self, exclude_dir):
        """指向目标目录之外的排除目录被拒绝"""
        with pytest.raises(ValidationError):
            build_glob_patterns("dist", ["jpg"], [exclude_dir])

    def test_glob_metacharacters_escaped(self):
        """目录名中的 glob 元字符被转义"""
        pattern_set = build_glob_patterns("out[1]", ["jpg"])

        assert pattern_set.patterns == ["out[[]1]/**/*.jpg"]


class TestFileResolver:
    """文件解析测试"""

    def test_exclusion(self, tmp_path: Path):
        """排除目录中的文件不出现在结果中"""
        dist = tmp_path / "dist"
        make_image(dist / "a.jpg")
        make_image(dist / "vendor" / "b.jpg")

        pattern_set = build_glob_patterns(dist, ["jpg"], ["vendor"])
        files = asyncio.run(resolve_files(pattern_set))

        assert files == [dist / "a.jpg"]

    def test_exclusion_with_leading_separator(self, tmp_path: Path):
        """开头带分隔符的 /vendor 与 vendor 排除同一个目录"""
        dist = tmp_path / "dist"
        make_image(dist / "a.jpg")
        make_image(dist / "vendor" / "b.jpg")

        pattern_set = build_glob_patterns(dist, ["jpg"], ["/vendor"])
        files = asyncio.run(resolve_files(pattern_set))

        assert files == [dist / "a.jpg"]

    def test_all_depths_matched(self, dist_dir: Path):
        """任意深度的文件都会匹配，按模式顺序排列"""
        pattern_set = build_glob_patterns(dist_dir, ["jpg", "png"])
        files = asyncio.run(resolve_files(pattern_set))

        assert files == [
            dist_dir / "a.jpg",
            dist_dir / "vendor" / "c.jpg",
            dist_dir / "img" / "b.png",
        ]

    def test_missing_target_dir_gives_empty_list(self, tmp_path: Path):
        """目标目录不存在时返回空列表而不是错误"""
        pattern_set = build_glob_patterns(tmp_path / "missing", ["jpg"])

        assert asyncio.run(resolve_files(pattern_set)) == []

    def test_overlapping_patterns_deduplicated(self, dist_dir: Path):
        """重复的扩展名不会产生重复文件"""
        pattern_set = build_glob_patterns(dist_dir, ["jpg", "jpg"], ["vendor"])
        files = asyncio.run(resolve_files(pattern_set))

        assert files == [dist_dir / "a.jpg"]

    def test_directories_not_matched(self, tmp_path: Path):
        """名称带扩展名的目录不会被当作文件"""
        (tmp_path / "fake.jpg").mkdir()
        make_image(tmp_path / "real.jpg")

        files = asyncio.run(resolve_files(build_glob_patterns(tmp_path, ["jpg"])))

        assert files == [tmp_path / "real.jpg"]

    def test_escaped_target_dir_resolves(self, tmp_path: Path):
        """包含方括号的目录也能正确解析"""
        target = tmp_path / "out[1]"
        make_image(target / "a.jpg")

        files = asyncio.run(resolve_files(build_glob_patterns(target, ["jpg"])))

        assert files == [target / "a.jpg"]


class TestPillowCompressor:
    """Pillow 压缩器测试"""

    def test_jpeg_to_webp(self, tmp_path: Path):
        """输出与原图同目录、同名、扩展名为 webp"""
        source = make_image(tmp_path / "photo.jpg", "JPEG")

        output = PillowCompressor().compress(source, tmp_path, 80)

        assert output == tmp_path / "photo.webp"
        assert output.exists()
        with Image.open(output) as img:
            assert img.format == "WEBP"
            assert img.size == (40, 30)

    def test_palette_with_transparency_keeps_alpha(self, tmp_path: Path):
        """带透明色的调色板图片转换后保留透明通道"""
        source = make_image(tmp_path / "icon.png", "PNG", mode="P")

        output = PillowCompressor().compress(source, tmp_path, 80)

        with Image.open(output) as img:
            assert img.mode == "RGBA"

    def test_unreadable_image_raises(self, tmp_path: Path):
        """无法识别的图片抛出 UnsupportedFormatError"""
        source = tmp_path / "broken.jpg"
        source.write_text("not an image", encoding="utf-8")

        with pytest.raises(UnsupportedFormatError) as exc_info:
            PillowCompressor().compress(source, tmp_path, 80)

        assert exc_info.value.input_path == source

    def test_missing_image_raises(self, tmp_path: Path):
        """文件不存在时抛出 ConversionError"""
        with pytest.raises(ConversionError):
            PillowCompressor().compress(tmp_path / "missing.jpg", tmp_path, 80)

    def test_webp_params(self):
        """质量参数与透明通道质量"""
        assert get_webp_params(90) == {"quality": 90, "method": 6, "alpha_quality": 100}
        assert get_webp_params(75)["alpha_quality"] == 85
        assert get_webp_params(50)["alpha_quality"] == 50
        assert get_webp_params(150)["quality"] == 100
        assert get_save_parameters("WEBP", 80) == get_webp_params(80)


class TestImageConverter:
    """图片转换器测试"""

    def test_convert_all_sequential(self, tmp_path: Path, sink):
        """按顺序转换并逐个记录日志"""
        files = [make_image(tmp_path / "a.jpg"), make_image(tmp_path / "b.jpg")]
        compressor = CopyingCompressor()
        converter = ImageConverter(compressor, quality=70, sink=sink)

        results = asyncio.run(converter.convert_all(files))

        assert [c[0] for c in compressor.calls] == files
        assert all(c[1] == tmp_path and c[2] == 70 for c in compressor.calls)
        assert [r.output_path for r in results] == [
            tmp_path / "a.webp",
            tmp_path / "b.webp",
        ]
        successes = sink.of_kind("success")
        assert len(successes) == 3
        assert str(files[0]) in successes[0]
        assert str(files[1]) in successes[1]

    def test_delete_originals(self, tmp_path: Path, sink):
        """删除阶段移除所有原图"""
        files = [make_image(tmp_path / "a.jpg"), make_image(tmp_path / "b.png", "PNG")]
        converter = ImageConverter(CopyingCompressor(), quality=80, sink=sink)

        deleted = asyncio.run(converter.delete_originals(files))

        assert deleted == files
        assert not any(f.exists() for f in files)

    def test_delete_attempts_every_file(self, tmp_path: Path, sink):
        """某个文件删除失败时仍会尝试删除其余文件"""
        missing = tmp_path / "missing.jpg"
        present = make_image(tmp_path / "present.jpg")
        converter = ImageConverter(CopyingCompressor(), quality=80, sink=sink)

        with pytest.raises(DeletionError) as exc_info:
            asyncio.run(converter.delete_originals([missing, present]))

        assert not present.exists()
        assert [path for path, _ in exc_info.value.failures] == [missing]


class TestTextRewriter:
    """文本替换测试"""

    def test_every_occurrence_replaced(self):
        """所有出现位置都被替换"""
        content = "foo.jpg bar.png foo.jpg\nurl(bar.png)"

        assert (
            rewrite_content(content, ["jpg", "png"], "webp")
            == "foo.webp bar.webp foo.webp\nurl(bar.webp)"
        )

    def test_case_sensitive_without_word_boundaries(self):
        """区分大小写，不检查单词边界"""
        content = "A.JPG b.jpgx c.jpg"

        assert rewrite_content(content, ["jpg"], "webp") == "A.JPG b.webpx c.webp"

    def test_rewrite_file_in_place(self, tmp_path: Path, sink):
        """原地覆盖文件"""
        page = tmp_path / "index.html"
        page.write_text('<img src="a.jpg"><img src="b.png">', encoding="utf-8")
        rewriter = TextRewriter(["jpg", "png"], "webp", sink=sink)

        rewritten = asyncio.run(rewriter.rewrite_all([page]))

        assert rewritten == [page]
        assert page.read_text(encoding="utf-8") == (
            '<img src="a.webp"><img src="b.webp">'
        )
        assert sink.of_kind("info") == [f"已替换图片路径: {page}"]

    def test_unmatched_file_byte_identical(self, tmp_path: Path, sink):
        """没有匹配内容的文件保持字节不变"""
        page = tmp_path / "plain.html"
        original = b"<p>no images</p>\r\n<p>caf\xc3\xa9 \xff</p>\n"
        page.write_bytes(original)
        rewriter = TextRewriter(["jpg", "png"], "webp", sink=sink)

        asyncio.run(rewriter.rewrite_all([page]))

        assert page.read_bytes() == original


class TestErrorHandler:
    """错误处理测试"""

    def test_phase_failed_logs_at_debug(self, caplog):
        """阶段失败只记录调试日志，面向用户的错误由输出端负责"""
        error = ConversionError("转换失败", Path("a.jpg"))

        with caplog.at_level(logging.DEBUG, logger="py_webp_and_path.exceptions"):
            outcome = ErrorHandler.phase_failed(
                PipelineStage.IMAGES_CONVERTED, error, "dist"
            )

        assert not outcome.success
        assert outcome.error == "转换失败 [a.jpg]"
        assert [r.levelno for r in caplog.records] == [logging.DEBUG]
        assert "阶段 images_converted失败 [dist]" in caplog.text
