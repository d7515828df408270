"""Tunable thresholds for the analysis pipeline.

Every value here is policy, not physics. Callers pass an ``AnalysisConfig``
into ``analyze``; nothing is read from the environment.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Sampling
ALPHA_THRESHOLD = 128  # alpha <= this is treated as transparent
TARGET_SAMPLES_PER_SIDE = 100
DEFAULT_TOP_K = 8

# Quality tiers by resolution (width * height)
POOR_MAX_PIXELS = 100_000
FAIR_MAX_PIXELS = 500_000
GOOD_MAX_PIXELS = 2_000_000
MIN_EXCELLENT_VARIANCE = 1000.0  # RGB variance of samples

# Lighting
DARK_LUMINANCE = 50
WASHED_OUT_LUMINANCE = 235
POOR_LIGHTING_FRACTION = 0.6
# Near-neutral samples, same criterion as an 18% gray card
NEUTRAL_MAX_SATURATION = 30
NEUTRAL_MIN_VALUE = 40
NEUTRAL_MAX_VALUE = 220
MIN_NEUTRAL_FRACTION = 0.05
WARM_SKEW = 0.08
NATURAL_SKEW_TOLERANCE = 0.04

# Blur detection
MIN_LAPLACIAN_VARIANCE = 100.0

# Matching
DEFAULT_MAX_DISTANCE = 100.0


class QualityThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    poor_max_pixels: int = Field(POOR_MAX_PIXELS, gt=0)
    fair_max_pixels: int = Field(FAIR_MAX_PIXELS, gt=0)
    good_max_pixels: int = Field(GOOD_MAX_PIXELS, gt=0)
    min_excellent_variance: float = Field(MIN_EXCELLENT_VARIANCE, ge=0)

    @model_validator(mode="after")
    def _check_monotonic(self):
        if not self.poor_max_pixels <= self.fair_max_pixels <= self.good_max_pixels:
            raise ValueError("Quality pixel thresholds must be non-decreasing")
        return self


class LightingThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    dark_luminance: float = DARK_LUMINANCE
    washed_out_luminance: float = WASHED_OUT_LUMINANCE
    poor_fraction: float = Field(POOR_LIGHTING_FRACTION, gt=0, le=1)
    neutral_max_saturation: int = Field(NEUTRAL_MAX_SATURATION, ge=0, le=255)
    neutral_min_value: int = Field(NEUTRAL_MIN_VALUE, ge=0, le=255)
    neutral_max_value: int = Field(NEUTRAL_MAX_VALUE, ge=0, le=255)
    min_neutral_fraction: float = Field(MIN_NEUTRAL_FRACTION, ge=0, le=1)
    warm_skew: float = Field(WARM_SKEW, ge=0)
    natural_skew_tolerance: float = Field(NATURAL_SKEW_TOLERANCE, ge=0)


class AnalysisConfig(BaseModel):
    """Explicit settings for one ``analyze`` call."""
    model_config = ConfigDict(frozen=True)

    top_k: int = Field(DEFAULT_TOP_K, ge=1, description="Number of colors to retain")
    alpha_threshold: int = Field(ALPHA_THRESHOLD, ge=0, le=255)
    quantize_bits: Optional[int] = Field(
        None, ge=1, le=7,
        description="Keep only the top N bits per channel before bucketing"
    )
    language: Literal["en", "ar"] = "en"
    min_sharpness: float = Field(MIN_LAPLACIAN_VARIANCE, ge=0)
    match_max_distance: float = Field(DEFAULT_MAX_DISTANCE, ge=0)
    match_metric: Literal["rgb", "cie76"] = "rgb"
    quality: QualityThresholds = Field(default_factory=QualityThresholds)
    lighting: LightingThresholds = Field(default_factory=LightingThresholds)


DEFAULT_CONFIG = AnalysisConfig()
