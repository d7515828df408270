"""Color extraction and reference matching for chemical test photos."""
from .config import AnalysisConfig, LightingThresholds, QualityThresholds
from .decode import ImageDecodeError, decode_image
from .matcher import annotate_colors, match_color, resolve_color
from .pipeline import analyze, analyze_many
from .raster import RasterBuffer
from .schemas import (
    AnalysisResult,
    ColorResolution,
    ConfidenceLevel,
    DetectedColor,
    ImageQuality,
    LightingCondition,
    LocalizedText,
    MatchResult,
    ReferenceColor,
)

__version__ = "1.0.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ColorResolution",
    "ConfidenceLevel",
    "DetectedColor",
    "ImageDecodeError",
    "ImageQuality",
    "LightingCondition",
    "LightingThresholds",
    "LocalizedText",
    "MatchResult",
    "QualityThresholds",
    "RasterBuffer",
    "ReferenceColor",
    "analyze",
    "analyze_many",
    "annotate_colors",
    "decode_image",
    "match_color",
    "resolve_color",
]
