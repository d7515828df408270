"""Adaptive-stride pixel sampling.

The stride grows with the square root of the pixel count so that any image
yields roughly 100 x 100 sample positions.
"""
import math
from typing import Iterator, NamedTuple

import numpy as np

from .config import ALPHA_THRESHOLD, TARGET_SAMPLES_PER_SIDE
from .raster import RasterBuffer


class PixelSample(NamedTuple):
    r: int
    g: int
    b: int
    alpha: int
    x: int
    y: int


def sampling_step(width: int, height: int) -> int:
    """Stride between sampled pixels: max(1, floor(sqrt(w*h) / 100))."""
    return max(1, math.isqrt(width * height) // TARGET_SAMPLES_PER_SIDE)


def sample_grid(raster: RasterBuffer) -> np.ndarray:
    """Strided (rows, cols, 4) view of the raster, transparent pixels included."""
    step = sampling_step(raster.width, raster.height)
    return raster.pixels[::step, ::step]


def opaque_mask(grid: np.ndarray, alpha_threshold: int = ALPHA_THRESHOLD) -> np.ndarray:
    return grid[..., 3] > alpha_threshold


def iter_samples(raster: RasterBuffer, alpha_threshold: int = ALPHA_THRESHOLD) -> Iterator[PixelSample]:
    """Yield opaque samples row by row (y outer, x inner).

    Pixels with alpha <= alpha_threshold are skipped.
    """
    step = sampling_step(raster.width, raster.height)
    grid = sample_grid(raster)
    rows, cols = np.nonzero(opaque_mask(grid, alpha_threshold))
    # np.nonzero returns indices in C order, which is row-major
    for row, col in zip(rows.tolist(), cols.tolist()):
        r, g, b, a = grid[row, col].tolist()
        yield PixelSample(r, g, b, a, col * step, row * step)


def opaque_rgb(raster: RasterBuffer, alpha_threshold: int = ALPHA_THRESHOLD) -> np.ndarray:
    """(N, 3) uint8 array of the same samples ``iter_samples`` yields."""
    grid = sample_grid(raster)
    return grid[opaque_mask(grid, alpha_threshold)][:, :3]
