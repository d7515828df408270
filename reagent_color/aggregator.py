"""Frequency histogram of sampled colors.

This is bucketing, not perceptual clustering: samples with the same key are
counted together. With ``quantize_bits`` the key drops the low bits of each
channel so that near-duplicate colors share a bucket.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .color_science import rgb_to_hex, round_half_up
from .sampler import PixelSample


@dataclass
class ColorBucket:
    key: str
    count: int = 0
    sum_x: int = 0
    sum_y: int = 0
    sum_r: int = 0
    sum_g: int = 0
    sum_b: int = 0

    def add(self, sample: PixelSample) -> None:
        self.count += 1
        self.sum_x += sample.x
        self.sum_y += sample.y
        self.sum_r += sample.r
        self.sum_g += sample.g
        self.sum_b += sample.b

    @property
    def mean_rgb(self) -> Tuple[int, int, int]:
        return (
            round_half_up(self.sum_r / self.count),
            round_half_up(self.sum_g / self.count),
            round_half_up(self.sum_b / self.count),
        )

    @property
    def mean_position(self) -> Tuple[int, int]:
        return round_half_up(self.sum_x / self.count), round_half_up(self.sum_y / self.count)


def bucket_key(r: int, g: int, b: int, quantize_bits: Optional[int] = None) -> str:
    if quantize_bits is None:
        return rgb_to_hex(r, g, b)
    mask = (0xFF << (8 - quantize_bits)) & 0xFF
    return rgb_to_hex(r & mask, g & mask, b & mask)


def aggregate(samples: Iterable[PixelSample], quantize_bits: Optional[int] = None) -> Dict[str, ColorBucket]:
    """Group samples into buckets keyed by hex.

    The returned dict preserves first-encounter order of keys, which the
    ranker relies on to break ties.
    """
    if quantize_bits is not None and not 1 <= quantize_bits <= 7:
        raise ValueError(f"quantize_bits must be between 1 and 7, got {quantize_bits}")

    buckets: Dict[str, ColorBucket] = {}
    for sample in samples:
        key = bucket_key(sample.r, sample.g, sample.b, quantize_bits)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = ColorBucket(key)
        bucket.add(sample)
    return buckets
