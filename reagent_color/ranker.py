"""Rank color buckets into dominance-scored DetectedColors."""
import logging
from typing import Dict, List

from .aggregator import ColorBucket
from .color_science import rgb_to_hex, rgb_to_hsl, rgb_to_lab
from .config import DEFAULT_TOP_K
from .naming import color_name, localized_color_name
from .schemas import DetectedColor, HslValues, LabValues, Position, RgbValues

# confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + dominance)
BASE_CONFIDENCE = 60.0
MAX_CONFIDENCE = 95.0

logger = logging.getLogger(__name__)


def color_confidence(dominance: float) -> float:
    """Heuristic trust in a detected color; more prevalent colors score higher."""
    return min(MAX_CONFIDENCE, BASE_CONFIDENCE + dominance)


def build_detected_color(bucket: ColorBucket, dominance: float, language: str = "en") -> DetectedColor:
    r, g, b = bucket.mean_rgb
    h, s, l = rgb_to_hsl(r, g, b)  # noqa: E741
    lab = rgb_to_lab(r, g, b)
    x, y = bucket.mean_position

    return DetectedColor(
        hex=rgb_to_hex(r, g, b),
        rgb=RgbValues(r=r, g=g, b=b),
        hsl=HslValues(h=h, s=s, l=l),
        lab=LabValues(l=round(lab["l"], 2), a=round(lab["a"], 2), b=round(lab["b"], 2)),
        position=Position(x=x, y=y),
        confidence=color_confidence(dominance),
        dominance=dominance,
        color_name=localized_color_name(color_name(r, g, b), language),
    )


def rank_buckets(
    buckets: Dict[str, ColorBucket],
    top_k: int = DEFAULT_TOP_K,
    language: str = "en",
) -> List[DetectedColor]:
    """Return the top_k buckets as DetectedColors, most dominant first.

    Dominance is relative to the retained buckets only, so the returned
    dominances sum to 100. Equal counts keep first-encounter order.
    Color names are given in ``language`` ("en" or "ar").

    Raises:
        ValueError: if top_k < 1
    """
    if top_k < 1:
        raise ValueError(f"top_k must be at least 1, got {top_k}")
    if not buckets:
        return []

    # sorted() is stable and dicts keep insertion order
    retained = sorted(buckets.values(), key=lambda bucket: bucket.count, reverse=True)[:top_k]
    total = sum(bucket.count for bucket in retained)
    logger.debug(
        f"Retained {len(retained)} of {len(buckets)} buckets, top bucket {retained[0].key} "
        f"with {retained[0].count} of {total} samples"
    )

    return [build_detected_color(bucket, 100.0 * bucket.count / total, language) for bucket in retained]
