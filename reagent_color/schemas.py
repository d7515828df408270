"""Pydantic models for engine inputs and results."""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .color_science import hex_to_rgb, rgb_to_hex


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LightingCondition(str, Enum):
    NATURAL = "natural"
    ARTIFICIAL = "artificial"
    MIXED = "mixed"
    POOR = "poor"


class ImageQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ConfidenceLevel(str, Enum):
    """Confidence attached to a reference color by the test author."""
    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def score(self) -> int:
        """Numeric base score (0-100) for this level."""
        return CONFIDENCE_SCORES[self]


CONFIDENCE_SCORES = {
    ConfidenceLevel.VERY_HIGH: 90,
    ConfidenceLevel.HIGH: 80,
    ConfidenceLevel.MEDIUM: 65,
    ConfidenceLevel.LOW: 45,
    ConfidenceLevel.VERY_LOW: 25,
}


class RgbValues(_Frozen):
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)

    def as_tuple(self):
        return (self.r, self.g, self.b)


class HslValues(_Frozen):
    h: int = Field(..., ge=0, le=359, description="Hue in degrees")
    s: int = Field(..., ge=0, le=100, description="Saturation percentage")
    l: int = Field(..., ge=0, le=100, description="Lightness percentage")


class LabValues(_Frozen):
    """CIELAB color space values."""
    l: float = Field(..., description="L* (lightness) component")
    a: float = Field(..., description="a* (green-red) component")
    b: float = Field(..., description="b* (yellow-blue) component")


class Position(_Frozen):
    """Average sample location, in raster pixel coordinates."""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


class LocalizedText(_Frozen):
    en: str
    ar: str = ""

    def get(self, language: str) -> str:
        if language == "ar" and self.ar:
            return self.ar
        return self.en


class DetectedColor(_Frozen):
    """One ranked color extracted from an image."""
    hex: str
    rgb: RgbValues
    hsl: HslValues
    lab: LabValues
    position: Position
    confidence: float = Field(..., ge=0, le=100)
    dominance: float = Field(..., ge=0, le=100, description="Share of retained samples (%)")
    color_name: str
    chemical_matches: List[str] = Field(
        default_factory=list,
        description="Possible substances; populated only when matched against a palette"
    )


class AnalysisResult(_Frozen):
    """Complete analysis of one image."""
    colors: List[DetectedColor] = Field(default_factory=list)
    dominant_color: Optional[DetectedColor] = None
    color_distribution: Dict[str, float] = Field(default_factory=dict)
    lighting_condition: LightingCondition
    image_quality: ImageQuality
    recommendations: List[str] = Field(default_factory=list)
    processing_time_ms: int = Field(..., ge=0)
    sample_count: int = Field(0, ge=0)
    width: int = Field(0, ge=0)
    height: int = Field(0, ge=0)


class ReferenceColor(_Frozen):
    """Expected reagent color outcome supplied by the test definition."""
    hex: str
    display_name: LocalizedText
    possible_substances: List[str] = Field(default_factory=list)
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    id: Optional[str] = None

    @field_validator("hex")
    @classmethod
    def _normalize_hex(cls, value: str) -> str:
        rgb = hex_to_rgb(value)
        if rgb is None:
            raise ValueError(f"Invalid hex color: {value!r}")
        return rgb_to_hex(*rgb)

    @property
    def rgb(self):
        return hex_to_rgb(self.hex)


class MatchResult(_Frozen):
    """Closest palette entry, or None when nothing is within max_distance."""
    matched: Optional[ReferenceColor] = None
    distance: float


class ColorResolution(_Frozen):
    """What the caller should present for a detected color."""
    hex: str
    reference: Optional[ReferenceColor] = None
    distance: float
    confidence: float = Field(..., ge=0, le=100)
    is_custom: bool
    display_name: LocalizedText
    possible_substances: List[str] = Field(default_factory=list)
