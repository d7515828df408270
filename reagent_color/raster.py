"""Decoded RGBA8 raster handed to the engine by the caller."""
from typing import Union

import numpy as np


class RasterBuffer:
    """Read-only RGBA8 image.

    Args:
        width, height: Image dimensions in pixels (may be zero)
        data: Either raw bytes of length width*height*4 in row-major RGBA
            order, or a uint8 array of shape (height, width, 4)

    Raises:
        ValueError: if the dimensions are negative or the data does not
            match them
    """

    def __init__(self, width: int, height: int, data: Union[bytes, bytearray, memoryview, np.ndarray]):
        if width < 0 or height < 0:
            raise ValueError(f"Raster dimensions must be non-negative, got {width}x{height}")

        if isinstance(data, np.ndarray):
            if data.dtype != np.uint8:
                raise ValueError(f"Raster array must be uint8, got {data.dtype}")
            pixels = data
        else:
            pixels = np.frombuffer(bytes(data), dtype=np.uint8)
            if pixels.size != width * height * 4:
                raise ValueError(
                    f"Raster buffer has {pixels.size} bytes, expected {width * height * 4} "
                    f"for {width}x{height} RGBA"
                )
            pixels = pixels.reshape((height, width, 4))

        if pixels.shape != (height, width, 4):
            raise ValueError(
                f"Raster array shape {pixels.shape} does not match ({height}, {width}, 4)"
            )

        # Private read-only copy
        self._pixels = np.array(pixels, copy=True)
        self._pixels.setflags(write=False)
        self.width = width
        self.height = height

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterBuffer":
        """Build from an (H, W, 3) RGB or (H, W, 4) RGBA uint8 array.

        RGB input is treated as fully opaque.
        """
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3) or (H, W, 4) array, got {array.shape}")
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=2)
        height, width = array.shape[:2]
        return cls(width, height, array.astype(np.uint8, copy=False))

    @property
    def pixels(self) -> np.ndarray:
        """(height, width, 4) read-only uint8 view."""
        return self._pixels

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def __repr__(self) -> str:
        return f"RasterBuffer({self.width}x{self.height})"
