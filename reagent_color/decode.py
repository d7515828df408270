"""Decode uploaded image bytes into a RasterBuffer.

This sits in front of the engine: uploads are validated and decoded here so
that ``analyze`` only ever sees pixels.
"""
import io
import logging
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .raster import RasterBuffer

logger = logging.getLogger(__name__)

ALLOWED_MAGIC_BYTES = {
    b'\xff\xd8\xff': 'jpeg',
    b'\x89PNG\r\n\x1a\n': 'png',
}
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
# Larger images are downscaled before analysis
MAX_DIMENSION = 1200


class ImageDecodeError(ValueError):
    """Upload rejected before reaching the engine."""


def validate_image_bytes(content: bytes) -> Optional[str]:
    """Validate image format using magic bytes.

    Returns:
        Format name if valid, None otherwise
    """
    for magic, fmt in ALLOWED_MAGIC_BYTES.items():
        if content.startswith(magic):
            return fmt
    # WebP has RIFF at start, need to check deeper
    if content.startswith(b'RIFF') and content[8:12] == b'WEBP':
        return 'webp'
    return None


def decode_image(
    content: bytes,
    max_bytes: int = MAX_IMAGE_SIZE_BYTES,
    max_dimension: Optional[int] = MAX_DIMENSION,
) -> RasterBuffer:
    """Validate and decode JPEG/PNG/WebP bytes to an RGBA raster.

    EXIF orientation is applied, and images larger than max_dimension on
    either side are downscaled preserving aspect ratio.

    Raises:
        ImageDecodeError: if the upload is too large, of an unsupported
            format, or cannot be decoded
    """
    if len(content) > max_bytes:
        raise ImageDecodeError(f"Image size exceeds {max_bytes / 1024 / 1024:.1f}MB limit")

    image_format = validate_image_bytes(content)
    if image_format is None:
        raise ImageDecodeError("Invalid image format. Only JPEG, PNG, and WebP are supported.")

    try:
        image = Image.open(io.BytesIO(content))
        image = ImageOps.exif_transpose(image)
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        if max_dimension and max(image.size) > max_dimension:
            image.thumbnail((max_dimension, max_dimension))
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Could not decode {image_format} image: {e}") from e

    logger.info(f"Decoded {image_format} upload to {image.width}x{image.height}")
    return RasterBuffer.from_array(np.array(image))
