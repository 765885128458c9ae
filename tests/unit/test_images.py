"""Unit tests for source image encoding."""

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from genbridge.core.images import (
    convert_to_rgb,
    create_image_data_url,
    encode_image_base64,
    encode_image_file,
    load_image,
    strip_data_url,
)
from genbridge.utils.exceptions import ImageProcessingError

JPEG_MAGIC = b"\xff\xd8\xff"


def _decode(encoded: str) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(encoded)))


@pytest.mark.unit
class TestLoadImage:
    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_image(tmp_path / "nope.png")

    def test_corrupt_file_raises_processing_error(self, tmp_path: Path):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"definitely not an image")
        with pytest.raises(ImageProcessingError) as exc_info:
            load_image(bad)
        assert exc_info.value.image_path == str(bad)

    def test_loads_png(self, tmp_path: Path):
        path = tmp_path / "a.png"
        Image.new("RGB", (3, 2)).save(path)
        assert load_image(path).size == (3, 2)


@pytest.mark.unit
class TestConvertToRgb:
    def test_rgb_unchanged(self):
        img = Image.new("RGB", (1, 1))
        assert convert_to_rgb(img) is img

    def test_transparent_pixels_become_white(self):
        img = Image.new("RGBA", (1, 1), (255, 0, 0, 0))
        out = convert_to_rgb(img)
        assert out.mode == "RGB"
        assert out.getpixel((0, 0)) == (255, 255, 255)

    def test_palette_converted(self):
        img = Image.new("P", (1, 1))
        assert convert_to_rgb(img).mode == "RGB"


@pytest.mark.unit
class TestEncoding:
    def test_encode_is_jpeg(self):
        encoded = encode_image_base64(Image.new("RGB", (4, 4), (10, 20, 30)))
        assert base64.b64decode(encoded).startswith(JPEG_MAGIC)

    def test_encode_file_keeps_dimensions(self, tmp_path: Path):
        path = tmp_path / "src.png"
        Image.new("RGBA", (8, 5), (0, 0, 255, 255)).save(path)
        decoded = _decode(encode_image_file(path))
        assert decoded.format == "JPEG"
        assert decoded.size == (8, 5)

    def test_data_url(self):
        assert create_image_data_url("QUJD") == "data:image/jpeg;base64,QUJD"
        assert create_image_data_url("QUJD", "image/png") == "data:image/png;base64,QUJD"


@pytest.mark.unit
class TestStripDataUrl:
    def test_strips_prefix(self):
        assert strip_data_url("data:image/jpeg;base64,QUJD") == "QUJD"

    def test_bare_base64_unchanged(self):
        assert strip_data_url("QUJD") == "QUJD"

    def test_whitespace_trimmed(self):
        assert strip_data_url("  QUJD\n") == "QUJD"
