"""Tests for parameter specifications and the shared configuration."""

import pytest

from gradelut.config import ADJUSTMENT_CONFIG, CONFIG, OperationSpec
from gradelut.tone import Adjustment, to_lut
from gradelut.tone.transforms import SKIP_EPSILON


class TestOperationSpec:
    """Test OperationSpec validation and merging."""

    def test_validate_clamps(self):
        spec = ADJUSTMENT_CONFIG.exposure
        assert spec.validate(3.0) == 2.0
        assert spec.validate(-3.0) == -2.0
        assert spec.validate(1) == 1.0

    def test_validate_rejects_non_numbers(self):
        with pytest.raises(ValueError, match="expected number"):
            ADJUSTMENT_CONFIG.contrast.validate("0.5")
        with pytest.raises(ValueError):
            ADJUSTMENT_CONFIG.contrast.validate(True)

    def test_is_neutral(self):
        spec = ADJUSTMENT_CONFIG.split_shadow_hue
        assert spec.is_neutral(220.0)
        assert spec.is_neutral(220.0005)
        assert not spec.is_neutral(200.0)

    def test_neutral_matches_stage_skip(self):
        """A value reported neutral is also skipped by the tone stages."""
        spec = ADJUSTMENT_CONFIG.exposure
        assert spec.is_neutral(SKIP_EPSILON * 0.5)
        assert not spec.is_neutral(SKIP_EPSILON)
        assert to_lut(Adjustment(exposure=SKIP_EPSILON * 0.5)).tolist() == list(range(256))

    def test_additive_combine(self):
        spec = OperationSpec("x", -1.0, 1.0, 0.0)
        assert spec.combine(0.25, 0.5) == pytest.approx(0.75)

    def test_replace_combine(self):
        """A neutral right operand keeps the left value."""
        spec = ADJUSTMENT_CONFIG.split_highlight_hue
        assert spec.combine(100.0, 40.0) == 100.0
        assert spec.combine(100.0, 300.0) == 300.0


class TestConfig:
    """Test configuration values."""

    def test_constants(self):
        assert CONFIG.lut_size == 256
        assert CONFIG.lut3d_size == 17
        assert CONFIG.identity_epsilon == 1e-3
        assert CONFIG.skip_epsilon == 1e-3

    def test_specs_cover_adjustment(self):
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        assert set(specs) == set(Adjustment().to_dict())
        assert all(spec.name == name for name, spec in specs.items())

    def test_ranges(self):
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        assert (specs["exposure"].min_value, specs["exposure"].max_value) == (-2.0, 2.0)
        assert (specs["vibrance"].min_value, specs["vibrance"].max_value) == (-1.0, 1.0)
        assert specs["split_shadow_hue"].max_value == 360.0

    def test_grouped_specs(self):
        assert CONFIG.get_all_specs()["adjustment"]["fade"] is ADJUSTMENT_CONFIG.fade
