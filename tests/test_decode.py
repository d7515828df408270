"""Tests for upload validation and decoding."""
import io

import pytest
from PIL import Image
from reagent_color import ImageDecodeError, analyze, decode_image
from reagent_color.decode import validate_image_bytes


def encode(image, fmt="PNG", **params):
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


class TestValidateImageBytes:
    """Test magic byte detection."""

    def test_png_and_jpeg(self):
        assert validate_image_bytes(b'\x89PNG\r\n\x1a\n' + bytes(8)) == 'png'
        assert validate_image_bytes(b'\xff\xd8\xff\xe0' + bytes(8)) == 'jpeg'

    def test_webp(self):
        assert validate_image_bytes(b'RIFF\x00\x00\x00\x00WEBPVP8 ') == 'webp'

    def test_riff_without_webp(self):
        assert validate_image_bytes(b'RIFF\x00\x00\x00\x00WAVEfmt ') is None

    def test_gif_rejected(self):
        assert validate_image_bytes(b'GIF89a' + bytes(8)) is None


class TestDecodeImage:
    """Test decoding to RGBA rasters."""

    def test_png(self):
        content = encode(Image.new("RGB", (50, 40), (10, 20, 30)))
        raster = decode_image(content)
        assert (raster.width, raster.height) == (50, 40)
        assert raster.pixels[0, 0].tolist() == [10, 20, 30, 255]

    def test_transparency_kept(self):
        content = encode(Image.new("RGBA", (8, 8), (0, 0, 0, 0)))
        raster = decode_image(content)
        assert (raster.pixels[..., 3] == 0).all()
        assert analyze(raster).colors == []

    def test_oversized_upload(self):
        content = encode(Image.new("RGB", (50, 40)))
        with pytest.raises(ImageDecodeError):
            decode_image(content, max_bytes=16)

    def test_unsupported_format(self):
        content = encode(Image.new("RGB", (10, 10)), fmt="GIF")
        with pytest.raises(ImageDecodeError):
            decode_image(content)

    def test_corrupt_data(self):
        """Valid magic bytes followed by garbage."""
        with pytest.raises(ImageDecodeError):
            decode_image(b'\x89PNG\r\n\x1a\n' + b'not really a png' * 4)

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_image(b'')

    def test_downscaled(self):
        """Large images keep their aspect ratio within max_dimension."""
        content = encode(Image.new("RGB", (2400, 1200), (0, 128, 255)))
        raster = decode_image(content)
        assert (raster.width, raster.height) == (1200, 600)

    def test_no_downscale(self):
        content = encode(Image.new("RGB", (2400, 1200)))
        raster = decode_image(content, max_dimension=None)
        assert (raster.width, raster.height) == (2400, 1200)

    def test_exif_orientation_applied(self):
        """A JPEG tagged as rotated 90 degrees comes out portrait."""
        exif = Image.Exif()
        exif[0x0112] = 6
        content = encode(Image.new("RGB", (60, 30), (200, 200, 200)), fmt="JPEG", exif=exif)
        raster = decode_image(content)
        assert (raster.width, raster.height) == (30, 60)
