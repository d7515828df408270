"""Tests for quality and lighting classification."""
import numpy as np
import pytest
from reagent_color.config import AnalysisConfig, QualityThresholds
from reagent_color.quality import (
    RECOMMENDATIONS,
    assess_image,
    build_recommendations,
    classify_lighting,
    classify_quality,
    color_variance,
    estimate_sharpness,
)
from reagent_color.raster import RasterBuffer
from reagent_color.schemas import ImageQuality, LightingCondition

QUALITY_ORDER = [ImageQuality.POOR, ImageQuality.FAIR, ImageQuality.GOOD, ImageQuality.EXCELLENT]


def uniform_samples(rgb, n=500):
    return np.tile(np.array(rgb, dtype=np.uint8), (n, 1))


class TestClassifyQuality:
    """Test resolution/contrast quality tiers."""

    def test_tiers(self):
        assert classify_quality(100, 100, 500.0) == ImageQuality.POOR
        assert classify_quality(500, 500, 500.0) == ImageQuality.FAIR
        assert classify_quality(1000, 1000, 500.0) == ImageQuality.GOOD
        assert classify_quality(2000, 1500, 2000.0) == ImageQuality.EXCELLENT

    def test_excellent_needs_contrast(self):
        """High resolution with flat color stays Good."""
        assert classify_quality(2000, 1500, 10.0) == ImageQuality.GOOD

    def test_no_samples(self):
        assert classify_quality(4000, 3000, None) == ImageQuality.POOR

    @pytest.mark.parametrize("variance", [0.0, 500.0, 5000.0])
    def test_monotonic_in_resolution(self, variance):
        sizes = [(10, 10), (300, 300), (400, 400), (800, 800), (1200, 1200), (1500, 1500), (3000, 3000)]
        ranks = [QUALITY_ORDER.index(classify_quality(w, h, variance)) for w, h in sizes]
        assert ranks == sorted(ranks)

    def test_custom_thresholds(self):
        thresholds = QualityThresholds(poor_max_pixels=10, fair_max_pixels=20, good_max_pixels=30)
        assert classify_quality(5, 5, 0.0, thresholds) == ImageQuality.GOOD

    def test_thresholds_must_increase(self):
        with pytest.raises(ValueError):
            QualityThresholds(poor_max_pixels=600_000, fair_max_pixels=500_000)


class TestClassifyLighting:
    """Test lighting heuristics."""

    def test_empty_is_mixed(self):
        assert classify_lighting(np.zeros((0, 3), dtype=np.uint8)) == LightingCondition.MIXED

    def test_dark_is_poor(self):
        assert classify_lighting(uniform_samples((10, 10, 10))) == LightingCondition.POOR

    def test_washed_out_is_poor(self):
        assert classify_lighting(uniform_samples((250, 250, 250))) == LightingCondition.POOR

    def test_balanced_neutral_is_natural(self):
        assert classify_lighting(uniform_samples((128, 128, 128))) == LightingCondition.NATURAL

    def test_warm_cast_is_artificial(self):
        """Neutral surfaces with a red-over-blue cast indicate tungsten light."""
        assert classify_lighting(uniform_samples((135, 128, 122))) == LightingCondition.ARTIFICIAL

    def test_cool_cast_is_mixed(self):
        assert classify_lighting(uniform_samples((120, 128, 135))) == LightingCondition.MIXED

    def test_no_neutral_reference_is_mixed(self):
        """Without near-neutral samples the temperature cannot be judged."""
        assert classify_lighting(uniform_samples((255, 0, 0))) == LightingCondition.MIXED

    def test_mostly_dark_with_some_light(self):
        samples = np.concatenate([uniform_samples((5, 5, 5), 70), uniform_samples((128, 128, 128), 30)])
        assert classify_lighting(samples) == LightingCondition.POOR


class TestSharpnessAndVariance:
    """Test image statistics."""

    def test_checkerboard_is_sharp(self):
        grid = np.zeros((20, 20, 4), dtype=np.uint8)
        grid[..., 3] = 255
        grid[::2, ::2, :3] = 255
        grid[1::2, 1::2, :3] = 255
        assert estimate_sharpness(grid) > 100

    def test_flat_is_not_sharp(self):
        grid = np.full((20, 20, 4), 128, dtype=np.uint8)
        assert estimate_sharpness(grid) == pytest.approx(0.0)

    def test_tiny_grid(self):
        assert estimate_sharpness(np.zeros((2, 2, 4), dtype=np.uint8)) is None

    def test_color_variance(self):
        assert color_variance(uniform_samples((10, 20, 30))) == 0.0
        two = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
        assert color_variance(two) == pytest.approx(3 * 127.5 ** 2)
        assert color_variance(np.zeros((0, 3), dtype=np.uint8)) is None


class TestRecommendations:
    """Test localized recommendations."""

    def test_no_colors(self):
        recs = build_recommendations(ImageQuality.POOR, LightingCondition.MIXED, 0)
        assert recs == [RECOMMENDATIONS["no_colors"]["en"]]

    def test_acceptable(self):
        recs = build_recommendations(ImageQuality.GOOD, LightingCondition.NATURAL, 5, sharpness=500.0)
        assert recs == [RECOMMENDATIONS["acceptable"]["en"]]

    def test_poor_everything(self):
        recs = build_recommendations(ImageQuality.POOR, LightingCondition.POOR, 1, sharpness=1.0)
        assert recs == [
            RECOMMENDATIONS["low_resolution"]["en"],
            RECOMMENDATIONS["poor_lighting"]["en"],
            RECOMMENDATIONS["limited_variation"]["en"],
            RECOMMENDATIONS["blurry"]["en"],
        ]

    def test_arabic(self):
        recs = build_recommendations(ImageQuality.GOOD, LightingCondition.ARTIFICIAL, 5, language="ar")
        assert recs == [RECOMMENDATIONS["artificial_lighting"]["ar"]]

    def test_catalogue_is_bilingual(self):
        for entry in RECOMMENDATIONS.values():
            assert entry["en"] and entry["ar"]


class TestAssessImage:
    """Test the combined assessment."""

    def test_small_solid_image(self):
        pixels = np.zeros((100, 100, 4), dtype=np.uint8)
        pixels[:] = (255, 0, 0, 255)
        assessment = assess_image(RasterBuffer.from_array(pixels), color_count=1)
        assert assessment.image_quality == ImageQuality.POOR
        assert assessment.lighting_condition == LightingCondition.MIXED
        assert assessment.color_variance == 0.0
        assert RECOMMENDATIONS["low_resolution"]["en"] in assessment.recommendations

    def test_empty_image(self):
        assessment = assess_image(RasterBuffer(0, 0, b""), color_count=0)
        assert assessment.image_quality == ImageQuality.POOR
        assert assessment.recommendations == [RECOMMENDATIONS["no_colors"]["en"]]
        assert assessment.sharpness is None

    def test_language_from_config(self):
        assessment = assess_image(RasterBuffer(0, 0, b""), 0, AnalysisConfig(language="ar"))
        assert assessment.recommendations == [RECOMMENDATIONS["no_colors"]["ar"]]
