"""Tests for tone masks, stage transfer functions and Adjustment LUTs."""

import numpy as np
import pytest

from gradelut.config import CONFIG
from gradelut.lut import Lut1D, Lut3D
from gradelut.tone import (
    STAGE_NAMES,
    Adjustment,
    brightness_to_gamma,
    evaluate,
    is_identity,
    to_lut,
    to_lut3d,
    to_lut_float,
    to_lut_float_rgb,
)
from gradelut.tone import masks
from gradelut.tone import transforms as tf

IDENTITY = np.arange(256, dtype=np.float64) / 255.0


class TestMasks:
    """Test tonal range masks."""

    def test_smoothstep_edges(self):
        assert masks.smoothstep(0.0, 1.0, -1.0) == 0.0
        assert masks.smoothstep(0.0, 1.0, 0.5) == 0.5
        assert masks.smoothstep(0.0, 1.0, 2.0) == 1.0

    def test_highlight_shadow_complement(self):
        x = np.linspace(0, 1, 11)
        np.testing.assert_allclose(masks.highlight_mask(x) + masks.shadow_mask(x), 1.0)

    def test_highlight_mask_range(self):
        assert masks.highlight_mask(0.2) == 0.0
        assert masks.highlight_mask(0.8) == 1.0

    def test_white_black_masks(self):
        assert masks.white_mask(0.7) == 0.0
        assert masks.white_mask(1.0) == 1.0
        assert masks.black_mask(0.0) == 1.0
        assert masks.black_mask(0.3) == 0.0

    def test_clarity_mask(self):
        np.testing.assert_allclose(masks.clarity_mask([0.0, 0.5, 1.0]), [0.0, 1.0, 0.0])


class TestTransforms:
    """Test individual stage functions."""

    def test_small_parameters_skip(self):
        """Parameters below the skip threshold return the input unchanged."""
        x = np.linspace(0, 1, 17)
        np.testing.assert_array_equal(tf.apply_exposure(x, 1e-4), x)
        np.testing.assert_array_equal(tf.apply_contrast(x, -1e-4), x)
        np.testing.assert_array_equal(tf.apply_fade(x, 0.0), x)

    def test_exposure_brightens(self):
        assert tf.apply_exposure(0.5, 1.0) > 0.5
        assert tf.apply_exposure(0.5, -1.0) < 0.5

    def test_exposure_one_stop(self):
        """One stop doubles linear light."""
        out = tf.apply_exposure(0.3, 1.0)
        expected = tf.linear_to_srgb(2.0 * tf.srgb_to_linear(0.3))
        assert abs(float(out) - float(expected)) < 1e-9

    def test_highlights_shadows_monotone_range(self):
        x = np.linspace(0, 1, 1001)
        assert np.all(np.diff(tf.apply_highlights_shadows(x, -0.6, 0.0)) >= -1e-12)
        assert np.all(np.diff(tf.apply_highlights_shadows(x, 0.0, 0.6)) >= -1e-12)

    def test_strong_negative_highlights_fold(self):
        """Past the monotone range the curve folds back around mid-grey."""
        low, high = tf.apply_highlights_shadows(np.array([0.4, 0.6]), -1.0, 0.0)
        assert low == pytest.approx(0.292)
        assert high == pytest.approx(0.208)
        assert high < low

    def test_brightness_gamma(self):
        assert brightness_to_gamma(0.0) == 1.0
        assert brightness_to_gamma(1.0) == 0.5
        assert brightness_to_gamma(-1.0) == 2.0

    def test_brightness_keeps_endpoints(self):
        out = tf.apply_brightness(np.array([0.0, 1.0]), 0.7)
        np.testing.assert_allclose(out, [0.0, 1.0])

    def test_contrast_positive_keeps_endpoints(self):
        out = tf.apply_contrast(np.array([0.0, 0.5, 1.0]), 0.5)
        np.testing.assert_allclose(out, [0.0, 0.5, 1.0], atol=1e-9)

    def test_contrast_positive_steepens(self):
        assert tf.apply_contrast(0.25, 0.5) < 0.25
        assert tf.apply_contrast(0.75, 0.5) > 0.75

    def test_contrast_negative_flattens(self):
        np.testing.assert_allclose(tf.apply_contrast(np.array([0.0, 1.0]), -0.5), [0.25, 0.75])
        np.testing.assert_allclose(tf.apply_contrast(np.array([0.0, 1.0]), -1.0), [0.5, 0.5])

    def test_fade_lifts_black(self):
        out = tf.apply_fade(np.array([0.0, 1.0]), 0.5)
        np.testing.assert_allclose(out, [0.1, 1.0])

    def test_toe_continuous(self):
        """Toe is continuous at its upper end."""
        below = tf.apply_toe(tf.TOE_END - 1e-9, 0.6)
        assert abs(float(below) - tf.TOE_END) < 1e-6
        assert tf.apply_toe(0.1, 0.6) < 0.1

    def test_shoulder_rolls_off(self):
        assert tf.apply_shoulder(0.8, 0.5) > 0.8
        assert tf.apply_shoulder(0.5, 0.5) == 0.5
        assert abs(float(tf.apply_shoulder(1.0, 0.5)) - 1.0) < 1e-12

    def test_temperature_gains(self):
        r, g, b = tf.temperature_tint_gains(1.0, 0.0)
        assert r > 1.0
        assert g == 1.0
        assert b < 1.0

    def test_split_tone_offsets(self):
        """Hue 0 pushes red up and green/blue down."""
        r, g, b = tf.hue_to_rgb_offset(0.0)
        assert r == pytest.approx(0.5)
        assert g == pytest.approx(-0.25)
        assert b == pytest.approx(-0.25)

    def test_color_balance(self):
        x = np.array([0.0, 0.5, 1.0])
        np.testing.assert_allclose(tf.apply_color_balance(x, 0.2, 0.0, 0.0), [0.2, 0.6, 1.0])
        np.testing.assert_allclose(tf.apply_color_balance(x, 0.0, 0.0, -0.5), [0.0, 0.25, 0.5])

    def test_clarity_keeps_midpoint(self):
        out = tf.apply_clarity(np.array([0.0, 0.5, 1.0]), 1.0)
        np.testing.assert_allclose(out, [0.0, 0.5, 1.0])
        assert tf.apply_clarity(0.75, 1.0) > 0.75

    def test_vibrance_grey_unchanged(self):
        grey = np.array([[0.4, 0.4, 0.4]])
        np.testing.assert_allclose(tf.apply_vibrance(grey, 1.0), grey)

    def test_vibrance_desaturate(self):
        rgb = np.array([[0.6, 0.5, 0.4]])
        out = tf.apply_vibrance(rgb, -1.0)
        assert np.ptp(out) < np.ptp(rgb)


class TestAdjustment:
    """Test the Adjustment record."""

    def test_default_is_identity(self):
        assert Adjustment().is_identity()
        assert is_identity(Adjustment.identity())

    def test_not_identity(self):
        assert not Adjustment(exposure=0.1).is_identity()
        assert not Adjustment(split_shadow_hue=100.0).is_identity()

    def test_from_dict_partial(self):
        adj = Adjustment.from_dict({"contrast": 0.2, "fade": 0.1})
        assert adj.contrast == 0.2
        assert adj.fade == 0.1
        assert adj.exposure == 0.0

    def test_from_dict_unknown_key(self):
        with pytest.raises(ValueError, match="Unknown adjustment"):
            Adjustment.from_dict({"sharpness": 1.0})

    def test_to_dict_skips_identity(self):
        assert Adjustment(tint=0.3).to_dict(include_identity=False) == {"tint": 0.3}

    def test_add_merges(self):
        merged = Adjustment(contrast=0.2, split_shadow_hue=180.0) + Adjustment(contrast=0.1)
        assert merged.contrast == pytest.approx(0.3)
        assert merged.split_shadow_hue == 180.0

    def test_sum(self):
        total = sum([Adjustment(exposure=0.5), Adjustment(exposure=0.25)])
        assert total.exposure == pytest.approx(0.75)

    def test_clamp(self):
        clamped = Adjustment(exposure=5.0, contrast=-3.0).clamp()
        assert clamped.exposure == 2.0
        assert clamped.contrast == -1.0

    def test_has_channel_effects(self):
        assert not Adjustment(contrast=0.5).has_channel_effects()
        assert Adjustment(temperature=0.2).has_channel_effects()
        assert Adjustment(lift_b=0.1).has_channel_effects()

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Adjustment().exposure = 1.0


class TestAdjustmentLut:
    """Test LUT generation from an Adjustment."""

    def test_stage_order(self):
        assert STAGE_NAMES[0] == "exposure"
        assert STAGE_NAMES[-1] == "fade"
        assert STAGE_NAMES.index("contrast") < STAGE_NAMES.index("temperature_tint")

    def test_identity_lut(self):
        lut = to_lut(Adjustment())
        assert lut.dtype == np.uint8
        np.testing.assert_array_equal(lut, np.arange(256))

    def test_identity_float(self):
        lut = to_lut_float(Adjustment())
        assert lut.dtype == np.float32
        np.testing.assert_allclose(lut, IDENTITY, atol=1e-6)

    def test_exposure_raises_lut(self):
        lut = to_lut_float(Adjustment(exposure=1.0))
        assert np.all(lut >= IDENTITY.astype(np.float32) - 1e-6)
        assert lut[128] > IDENTITY[128]

    def test_contrast_changes_mid_tones(self):
        lut = to_lut_float(Adjustment(contrast=0.5))
        assert lut[64] < IDENTITY[64]
        assert lut[192] > IDENTITY[192]

    def test_master_ignores_channel_stages(self):
        lut = to_lut_float(Adjustment(temperature=0.8))
        np.testing.assert_allclose(lut, IDENTITY, atol=1e-6)

    def test_rgb_shares_master_without_channel_effects(self):
        rgb = to_lut_float_rgb(Adjustment(contrast=0.3))
        assert isinstance(rgb, Lut1D)
        assert rgb.r is rgb.g is rgb.b

    def test_rgb_temperature(self):
        rgb = to_lut_float_rgb(Adjustment(temperature=0.5))
        assert rgb.r[128] > rgb.g[128] > rgb.b[128]

    def test_evaluate_matches_lut(self):
        adj = Adjustment(shadows=0.3, clarity=0.2)
        values = np.arange(256) / 255.0
        np.testing.assert_allclose(evaluate(adj, values), to_lut_float(adj), atol=1e-6)

    def test_output_always_in_range(self):
        adj = Adjustment(exposure=2.0, highlights=1.0, whites=1.0, gain_r=1.0, lift_b=1.0)
        rgb = to_lut_float_rgb(adj)
        for channel in rgb.channels:
            assert channel.min() >= 0.0
            assert channel.max() <= 1.0

    def test_to_lut3d_default_size(self):
        lut3d = to_lut3d(Adjustment(contrast=0.2))
        assert isinstance(lut3d, Lut3D)
        assert lut3d.size == CONFIG.lut3d_size

    def test_to_lut3d_identity(self):
        assert to_lut3d(Adjustment(), size=5).is_identity(1e-2)

    def test_to_lut3d_vibrance(self):
        """Negative vibrance pulls a muted colour toward grey."""
        plain = to_lut3d(Adjustment(), size=9).lookup(0.75, 0.5, 0.25)
        r, g, b = to_lut3d(Adjustment(vibrance=-1.0), size=9).lookup(0.75, 0.5, 0.25)
        assert r < plain[0]
        assert b > plain[2]


MONOTONE_ADJUSTMENTS = [
    {"exposure": 1.5},
    {"exposure": -1.5},
    {"highlights": 0.8, "shadows": -0.5},
    {"whites": 0.8, "blacks": -0.5},
    {"brightness": 0.8},
    {"brightness": -0.8},
    {"contrast": 0.8},
    {"contrast": -0.5},
    {"clarity": 0.8},
    {"clarity": -0.8},
    {"fade": 1.0},
    {"toe": 1.0, "shoulder": 1.0},
]

ENDPOINT_PRESERVING = [
    {"exposure": 1.0},
    {"brightness": 0.5},
    {"brightness": -0.5},
    {"contrast": 0.5},
    {"brightness": 0.3, "contrast": 0.3},
    {"clarity": 0.5},
    {"highlights": 0.5, "shadows": -0.5},
]


class TestAdjustmentBehaviour:
    """Test tonal behaviour of the quantized master LUT."""

    @pytest.mark.parametrize("params", MONOTONE_ADJUSTMENTS)
    def test_monotone(self, params):
        lut = to_lut(Adjustment(**params)).astype(np.int16)
        assert np.all(np.diff(lut) >= 0), params

    @pytest.mark.parametrize("params", ENDPOINT_PRESERVING)
    def test_endpoints_preserved(self, params):
        lut = to_lut(Adjustment(**params))
        assert lut[0] == 0
        assert lut[255] == 255

    def test_contrast_minus_one_is_flat_grey(self):
        np.testing.assert_array_equal(to_lut(Adjustment(contrast=-1.0)), np.full(256, 128))

    def test_negative_contrast_keeps_midpoint(self):
        lut = to_lut(Adjustment(contrast=-0.5))
        assert lut[128] == 128
        assert lut[64] > 64
        assert lut[192] < 192

    def test_exposure_in_linear_light(self):
        """One stop up lands sRGB 118 well short of doubling it."""
        assert 150 <= to_lut(Adjustment(exposure=1.0))[118] <= 180

    def test_whites_narrower_than_highlights(self):
        whites = int(to_lut(Adjustment(whites=0.5))[160])
        highlights = int(to_lut(Adjustment(highlights=0.5))[160])
        assert abs(whites - 160) < abs(highlights - 160)

    def test_whites_leave_midtones(self):
        assert 120 < to_lut(Adjustment(whites=0.5))[128] < 135
        assert to_lut(Adjustment(whites=0.5))[250] > 250

    def test_fade_lifts_only_black(self):
        lut = to_lut(Adjustment(fade=0.5))
        assert lut[0] > 0
        assert lut[255] == 255


class TestChannelLut:
    """Test per-channel ordering from temperature and tint."""

    def test_cool_temperature(self):
        rgb = to_lut_float_rgb(Adjustment(temperature=-0.5))
        assert rgb.b[128] > rgb.g[128] > rgb.r[128]

    def test_positive_tint_is_magenta(self):
        rgb = to_lut_float_rgb(Adjustment(tint=0.5))
        assert rgb.r[128] > rgb.g[128]
        assert rgb.b[128] > rgb.g[128]

    def test_negative_tint_is_green(self):
        rgb = to_lut_float_rgb(Adjustment(tint=-0.5))
        assert rgb.g[128] > rgb.r[128]
        assert rgb.g[128] > rgb.b[128]

    def test_channels_stay_in_range(self):
        rgb = to_lut_float_rgb(Adjustment(temperature=1.0, tint=-1.0))
        for channel in rgb.channels:
            assert channel.min() >= 0.0
            assert channel.max() <= 1.0
