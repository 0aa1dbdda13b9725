#!/usr/bin/env python3
"""插件使用演示

在临时目录中生成一个小型构建产物，然后运行插件：
- 🖼️ 图片转换为 WebP
- 🗑️ 删除原图
- ✏️ 替换 HTML/CSS 中的图片引用
"""

import asyncio
import tempfile
from pathlib import Path

from PIL import Image

from py_webp_and_path import webp_and_path
from py_webp_and_path.utils import configure_logging


def create_sample_bundle(dist: Path) -> None:
    """创建示例构建产物"""
    (dist / "img").mkdir(parents=True)
    (dist / "vendor").mkdir()

    Image.new("RGB", (320, 200), color="steelblue").save(dist / "hero.jpg", "JPEG")
    Image.new("RGBA", (64, 64), color=(255, 0, 0, 128)).save(
        dist / "img" / "logo.png", "PNG"
    )
    Image.new("RGB", (32, 32), color="gray").save(dist / "vendor" / "icon.png", "PNG")

    (dist / "index.html").write_text(
        '<img src="hero.jpg">\n<img src="img/logo.png">\n', encoding="utf-8"
    )
    (dist / "style.css").write_text(
        ".logo { background: url(img/logo.png); }\n", encoding="utf-8"
    )


def main() -> None:
    configure_logging()

    with tempfile.TemporaryDirectory() as temp_dir:
        dist = Path(temp_dir) / "dist"
        create_sample_bundle(dist)

        plugin = webp_and_path(target_dir=dist, exclude_dirs=["vendor"], quality=75)
        result = asyncio.run(plugin.write_bundle())

        print(f"📊 {result.get_summary()}")
        for conversion in result.conversions:
            print(f"  {conversion.input_path.name}: {conversion.get_summary()}")

        print("\n📄 index.html:")
        print((dist / "index.html").read_text(encoding="utf-8"))

        print("📁 剩余文件:")
        for path in sorted(dist.rglob("*")):
            if path.is_file():
                print(f"  {path.relative_to(dist)}")


if __name__ == "__main__":
    main()
