"""Match detected colors against a test's reference palette.

A match is only reported when the closest reference lies within
``max_distance``; otherwise the caller gets ``matched=None`` and must present
the color as unclassified rather than as a chemical result.
"""
import logging
import math
from typing import Callable, Dict, List, Literal, Sequence, Tuple

from .color_science import delta_e_cie76, hex_to_rgb, rgb_distance, rgb_to_hex, rgb_to_lab
from .config import DEFAULT_MAX_DISTANCE
from .schemas import (
    ConfidenceLevel,
    ColorResolution,
    DetectedColor,
    LocalizedText,
    MatchResult,
    ReferenceColor,
)

logger = logging.getLogger(__name__)

Metric = Literal["rgb", "cie76"]

UNCLASSIFIED_NAME = LocalizedText(en="Color detected from image", ar="لون مكتشف من الصورة")
UNCLASSIFIED_SUBSTANCES = LocalizedText(en="Requires additional analysis", ar="يتطلب تحليل إضافي")
UNCLASSIFIED_LEVEL = ConfidenceLevel.LOW


def _cie76(rgb1: Tuple[int, int, int], rgb2: Tuple[int, int, int]) -> float:
    return delta_e_cie76(rgb_to_lab(*rgb1), rgb_to_lab(*rgb2))


DISTANCE_METRICS: Dict[str, Callable[[Tuple[int, int, int], Tuple[int, int, int]], float]] = {
    "rgb": rgb_distance,
    "cie76": _cie76,
}


def match_color(
    detected_hex: str,
    palette: Sequence[ReferenceColor],
    max_distance: float = DEFAULT_MAX_DISTANCE,
    metric: Metric = "rgb",
) -> MatchResult:
    """Find the palette entry closest to detected_hex.

    Args:
        detected_hex: Color to resolve, ``#rrggbb`` or ``rrggbb``
        palette: Reference colors for the current test (read-only)
        max_distance: Acceptance threshold; farther matches are rejected
        metric: "rgb" (Euclidean RGB) or "cie76" (Delta E in Lab)

    Returns:
        MatchResult with the closest reference, or matched=None when the
        palette is empty, the hex is malformed, or the closest entry is
        farther than max_distance. Ties go to the earlier palette entry.

    Raises:
        ValueError: on a negative or NaN max_distance or an unknown metric
    """
    if math.isnan(max_distance) or max_distance < 0:
        raise ValueError(f"max_distance must be non-negative, got {max_distance}")
    distance_fn = DISTANCE_METRICS.get(metric)
    if distance_fn is None:
        raise ValueError(f"Unknown distance metric: {metric!r}")

    target = hex_to_rgb(detected_hex)
    if target is None:
        logger.warning(f"Cannot match malformed hex color: {detected_hex!r}")
        return MatchResult(matched=None, distance=math.inf)

    best = None
    best_distance = math.inf
    for reference in palette:
        distance = distance_fn(target, reference.rgb)
        if distance < best_distance:
            best = reference
            best_distance = distance

    if best is None or best_distance > max_distance:
        return MatchResult(matched=None, distance=best_distance)
    return MatchResult(matched=best, distance=best_distance)


def resolve_color(
    detected_hex: str,
    palette: Sequence[ReferenceColor],
    max_distance: float = DEFAULT_MAX_DISTANCE,
    metric: Metric = "rgb",
    language: str = "en",
) -> ColorResolution:
    """Turn a detected color into what the caller should present.

    A confident match carries the reference's substances and its confidence
    level score. Anything else becomes a custom, unclassified result at
    low confidence.
    """
    result = match_color(detected_hex, palette, max_distance, metric)
    rgb = hex_to_rgb(detected_hex)
    hex_code = rgb_to_hex(*rgb) if rgb is not None else str(detected_hex)

    if result.matched is not None:
        reference = result.matched
        return ColorResolution(
            hex=hex_code,
            reference=reference,
            distance=result.distance,
            confidence=reference.confidence_level.score,
            is_custom=False,
            display_name=reference.display_name,
            possible_substances=list(reference.possible_substances),
        )

    logger.info(f"No reference within {max_distance} of {hex_code}, returning unclassified color")
    return ColorResolution(
        hex=hex_code,
        reference=None,
        distance=result.distance,
        confidence=UNCLASSIFIED_LEVEL.score,
        is_custom=True,
        display_name=UNCLASSIFIED_NAME,
        possible_substances=[UNCLASSIFIED_SUBSTANCES.get(language)],
    )


def annotate_colors(
    colors: Sequence[DetectedColor],
    palette: Sequence[ReferenceColor],
    max_distance: float = DEFAULT_MAX_DISTANCE,
    metric: Metric = "rgb",
) -> List[DetectedColor]:
    """Copy colors with chemical_matches filled from their palette match."""
    annotated = []
    for color in colors:
        result = match_color(color.hex, palette, max_distance, metric)
        substances = list(result.matched.possible_substances) if result.matched is not None else []
        annotated.append(color.model_copy(update={"chemical_matches": substances}))
    return annotated
