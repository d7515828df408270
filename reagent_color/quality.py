"""Image quality and lighting classification.

Advisory only: any numeric degeneracy degrades to Mixed lighting / Fair
quality instead of raising.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import cv2
import numpy as np

from .color_science import relative_luminance
from .config import DEFAULT_CONFIG, AnalysisConfig, LightingThresholds, QualityThresholds
from .raster import RasterBuffer
from .sampler import opaque_rgb, sample_grid
from .schemas import ImageQuality, LightingCondition

logger = logging.getLogger(__name__)

# Color count below which the image is considered to lack variation
MIN_COLOR_VARIETY = 3

RECOMMENDATIONS = {
    "no_colors": {
        "en": "No opaque pixels were found; upload a photo of the test result",
        "ar": "لم يتم العثور على بكسلات معتمة؛ يرجى رفع صورة لنتيجة الاختبار",
    },
    "low_resolution": {
        "en": "Use a higher resolution camera for better color detection",
        "ar": "استخدم كاميرا بدقة أعلى لكشف أفضل للألوان",
    },
    "poor_lighting": {
        "en": "Consider retaking the photo with better lighting for more accurate results",
        "ar": "فكر في إعادة التقاط الصورة مع إضاءة أفضل للحصول على نتائج أكثر دقة",
    },
    "artificial_lighting": {
        "en": "Warm artificial light detected; retake the photo under natural daylight if possible",
        "ar": "تم اكتشاف إضاءة اصطناعية دافئة؛ أعد التقاط الصورة في ضوء النهار الطبيعي إن أمكن",
    },
    "mixed_lighting": {
        "en": "Avoid mixing light sources; a single neutral light source gives more reliable colors",
        "ar": "تجنب خلط مصادر الإضاءة؛ مصدر إضاءة محايد واحد يعطي ألوانًا أكثر موثوقية",
    },
    "limited_variation": {
        "en": "The image may have limited color variation. Try a different angle or lighting",
        "ar": "قد تحتوي الصورة على تنوع محدود في الألوان. جرب زاوية أو إضاءة مختلفة",
    },
    "blurry": {
        "en": "The image may be blurry; hold the camera steady and refocus",
        "ar": "قد تكون الصورة ضبابية؛ ثبّت الكاميرا وأعد التركيز",
    },
    "acceptable": {
        "en": "Image quality is acceptable for analysis",
        "ar": "جودة الصورة مقبولة للتحليل",
    },
}


@dataclass
class ImageAssessment:
    lighting_condition: LightingCondition
    image_quality: ImageQuality
    recommendations: List[str] = field(default_factory=list)
    sharpness: Optional[float] = None
    color_variance: Optional[float] = None


def color_variance(rgb: np.ndarray) -> Optional[float]:
    """Mean squared distance of samples from their mean color."""
    if len(rgb) == 0:
        return None
    return float(np.var(rgb.astype(np.float64), axis=0).sum())


def estimate_sharpness(grid: np.ndarray) -> Optional[float]:
    """Laplacian variance of the sampled grid; low values suggest blur."""
    if grid.ndim != 3 or grid.shape[0] < 3 or grid.shape[1] < 3:
        return None
    gray = cv2.cvtColor(np.ascontiguousarray(grid), cv2.COLOR_RGBA2GRAY)
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


def classify_quality(
    width: int,
    height: int,
    variance: Optional[float],
    thresholds: QualityThresholds = QualityThresholds(),
) -> ImageQuality:
    """Tier by resolution; Excellent additionally needs enough color variance."""
    if variance is None:
        return ImageQuality.POOR

    pixels = width * height
    if pixels < thresholds.poor_max_pixels:
        return ImageQuality.POOR
    if pixels < thresholds.fair_max_pixels:
        return ImageQuality.FAIR
    if pixels < thresholds.good_max_pixels:
        return ImageQuality.GOOD
    if variance >= thresholds.min_excellent_variance:
        return ImageQuality.EXCELLENT
    return ImageQuality.GOOD


def classify_lighting(rgb: np.ndarray, thresholds: LightingThresholds = LightingThresholds()) -> LightingCondition:
    """Classify lighting from (N, 3) uint8 RGB samples.

    Very dark or washed-out images are Poor. Otherwise the color temperature
    is read off the near-neutral samples, the way a gray card would be used:
    a warm (red over blue) cast means Artificial, a balanced one Natural.
    """
    if len(rgb) == 0:
        return LightingCondition.MIXED

    samples = np.ascontiguousarray(rgb, dtype=np.uint8).reshape(-1, 1, 3)
    hsv = cv2.cvtColor(samples, cv2.COLOR_RGB2HSV).reshape(-1, 3)
    saturation = hsv[:, 1]
    value = hsv[:, 2]

    rgb_f = rgb.astype(np.float64)
    luminance = relative_luminance(rgb_f[:, 0], rgb_f[:, 1], rgb_f[:, 2])

    dark = np.mean(luminance < thresholds.dark_luminance)
    washed_out = np.mean(
        (luminance > thresholds.washed_out_luminance) & (saturation < thresholds.neutral_max_saturation)
    )
    if dark >= thresholds.poor_fraction or washed_out >= thresholds.poor_fraction:
        return LightingCondition.POOR

    neutral = (
        (saturation < thresholds.neutral_max_saturation)
        & (value > thresholds.neutral_min_value)
        & (value < thresholds.neutral_max_value)
    )
    if np.mean(neutral) < thresholds.min_neutral_fraction:
        return LightingCondition.MIXED

    neutral_rgb = rgb_f[neutral]
    mean_luminance = float(np.mean(luminance[neutral]))
    skew = float(np.mean(neutral_rgb[:, 0] - neutral_rgb[:, 2])) / mean_luminance
    if not np.isfinite(skew):
        logger.warning("Non-finite color temperature skew, reporting mixed lighting")
        return LightingCondition.MIXED

    if skew > thresholds.warm_skew:
        return LightingCondition.ARTIFICIAL
    if abs(skew) <= thresholds.natural_skew_tolerance:
        return LightingCondition.NATURAL
    return LightingCondition.MIXED


def build_recommendations(
    quality: ImageQuality,
    lighting: LightingCondition,
    color_count: int,
    sharpness: Optional[float] = None,
    min_sharpness: float = DEFAULT_CONFIG.min_sharpness,
    language: str = "en",
) -> List[str]:
    """Pick localized advice strings for the given assessment."""
    if color_count == 0:
        keys = ["no_colors"]
    else:
        keys = []
        if quality == ImageQuality.POOR:
            keys.append("low_resolution")
        if lighting == LightingCondition.POOR:
            keys.append("poor_lighting")
        elif lighting == LightingCondition.ARTIFICIAL:
            keys.append("artificial_lighting")
        elif lighting == LightingCondition.MIXED:
            keys.append("mixed_lighting")
        if color_count < MIN_COLOR_VARIETY:
            keys.append("limited_variation")
        if sharpness is not None and sharpness < min_sharpness:
            keys.append("blurry")
        if not keys:
            keys.append("acceptable")

    lang = "ar" if language == "ar" else "en"
    return [RECOMMENDATIONS[key][lang] for key in keys]


def assess_image(raster: RasterBuffer, color_count: int, config: AnalysisConfig = DEFAULT_CONFIG) -> ImageAssessment:
    """Classify quality and lighting of a raster and produce recommendations."""
    rgb = opaque_rgb(raster, config.alpha_threshold)
    variance = color_variance(rgb) if color_count else None

    try:
        lighting = classify_lighting(rgb, config.lighting)
        quality = classify_quality(raster.width, raster.height, variance, config.quality)
        sharpness = estimate_sharpness(sample_grid(raster)) if color_count else None
    except (cv2.error, ValueError, FloatingPointError) as e:
        logger.warning(f"Image assessment failed, using fallback classification: {e}")
        lighting = LightingCondition.MIXED
        quality = ImageQuality.FAIR if color_count else ImageQuality.POOR
        sharpness = None

    recommendations = build_recommendations(
        quality,
        lighting,
        color_count,
        sharpness=sharpness,
        min_sharpness=config.min_sharpness,
        language=config.language,
    )
    return ImageAssessment(
        lighting_condition=lighting,
        image_quality=quality,
        recommendations=recommendations,
        sharpness=sharpness,
        color_variance=variance,
    )
