"""Sampler -> Aggregator -> Ranker -> Classifier pipeline.

``analyze`` is a pure function of its inputs apart from the measured
processing time, so independent calls can run concurrently.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence

from .aggregator import aggregate
from .config import DEFAULT_CONFIG, AnalysisConfig
from .matcher import annotate_colors
from .quality import ImageAssessment, assess_image
from .ranker import rank_buckets
from .raster import RasterBuffer
from .sampler import iter_samples
from .schemas import AnalysisResult, DetectedColor, ReferenceColor

logger = logging.getLogger(__name__)


def color_distribution(colors: Sequence[DetectedColor]) -> Dict[str, float]:
    """Total dominance per coarse color name."""
    distribution: Dict[str, float] = {}
    for color in colors:
        distribution[color.color_name] = distribution.get(color.color_name, 0.0) + color.dominance
    return distribution


def assemble_result(
    colors: List[DetectedColor],
    assessment: ImageAssessment,
    processing_time_ms: int,
    sample_count: int = 0,
    width: int = 0,
    height: int = 0,
) -> AnalysisResult:
    """Package ranked colors and the image assessment into one result."""
    return AnalysisResult(
        colors=colors,
        dominant_color=colors[0] if colors else None,
        color_distribution=color_distribution(colors),
        lighting_condition=assessment.lighting_condition,
        image_quality=assessment.image_quality,
        recommendations=assessment.recommendations,
        processing_time_ms=processing_time_ms,
        sample_count=sample_count,
        width=width,
        height=height,
    )


def analyze(
    raster: RasterBuffer,
    config: Optional[AnalysisConfig] = None,
    palette: Optional[Sequence[ReferenceColor]] = None,
) -> AnalysisResult:
    """Extract, rank and classify the colors of a decoded image.

    Args:
        raster: Decoded RGBA8 image
        config: Thresholds and options; defaults to ``AnalysisConfig()``
        palette: Optional reference colors; when given, each detected color's
            chemical_matches is filled from its palette match

    Returns:
        AnalysisResult. An empty or fully transparent image yields no colors,
        no dominant color and Poor quality.
    """
    config = config or DEFAULT_CONFIG
    start_time = time.perf_counter()

    buckets = aggregate(iter_samples(raster, config.alpha_threshold), config.quantize_bits)
    sample_count = sum(bucket.count for bucket in buckets.values())
    colors = rank_buckets(buckets, config.top_k, config.language)

    if not colors:
        logger.warning(f"No opaque samples in {raster.width}x{raster.height} raster")

    if palette:
        colors = annotate_colors(colors, palette, config.match_max_distance, config.match_metric)

    assessment = assess_image(raster, len(colors), config)

    processing_time_ms = int((time.perf_counter() - start_time) * 1000)
    result = assemble_result(
        colors,
        assessment,
        processing_time_ms,
        sample_count=sample_count,
        width=raster.width,
        height=raster.height,
    )

    dominant = result.dominant_color.hex if result.dominant_color else None
    logger.info(
        f"Analyzed {raster.width}x{raster.height}: {len(colors)} colors from {sample_count} samples, "
        f"dominant={dominant}, quality={result.image_quality.value}, "
        f"lighting={result.lighting_condition.value}, {processing_time_ms}ms"
    )
    return result


def analyze_many(
    rasters: Iterable[RasterBuffer],
    config: Optional[AnalysisConfig] = None,
    palette: Optional[Sequence[ReferenceColor]] = None,
    max_workers: int = 2,
) -> List[AnalysisResult]:
    """Analyze several rasters on a thread pool; results keep input order."""
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda raster: analyze(raster, config, palette), rasters))
