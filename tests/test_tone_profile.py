"""Tests for per-channel tone profiles and tone transfer."""

import numpy as np
import pytest

from gradelut.luminance import ChannelTone, ToneProfile, create_transfer_lut
from gradelut.lut import compose


def _grey_row(values):
    values = np.asarray(values).astype(np.uint8)
    return np.stack([values, values, values], axis=-1)


@pytest.fixture
def full_gradient():
    return _grey_row(np.arange(256))


class TestExtract:
    """Test measuring a ToneProfile from an image."""

    def test_neutral(self):
        profile = ToneProfile.neutral()
        for tone in profile.channels:
            assert tone == ChannelTone(black_point=0, white_point=255, gamma=1.0)

    def test_full_gradient_is_neutral(self, full_gradient):
        profile = ToneProfile.extract(full_gradient, percentile=0)
        assert profile.r.black_point == 0
        assert profile.r.white_point == 255
        assert profile.r.gamma == pytest.approx(1.0, abs=0.05)

    def test_limited_range(self):
        profile = ToneProfile.extract(_grey_row(np.arange(50, 201)), percentile=0)
        assert profile.g.black_point == 50
        assert profile.g.white_point == 200

    def test_dark_image_gamma_above_one(self):
        x = np.arange(256) / 255
        profile = ToneProfile.extract(_grey_row(np.round(x**2 * 255)), percentile=0)
        assert profile.r.gamma > 1.0

    def test_bright_image_gamma_below_one(self):
        x = np.arange(256) / 255
        profile = ToneProfile.extract(_grey_row(np.round(np.sqrt(x) * 255)), percentile=0)
        assert profile.r.gamma < 1.0

    def test_channels_measured_independently(self):
        image = np.zeros((151, 4), dtype=np.uint8)
        image[:, 0] = np.linspace(0, 255, 151).astype(np.uint8)
        image[:, 1] = 128
        image[:, 2] = np.arange(50, 201)
        image[:, 3] = 255
        profile = ToneProfile.extract(image, percentile=0)
        assert (profile.r.black_point, profile.r.white_point) == (0, 255)
        assert profile.g.black_point == profile.g.white_point == 128
        assert profile.g.gamma == 1.0
        assert (profile.b.black_point, profile.b.white_point) == (50, 200)

    def test_empty_image(self):
        assert ToneProfile.extract(np.zeros((0, 3), dtype=np.uint8)) == ToneProfile.neutral()


class TestToneLuts:
    """Test LUTs built from a ToneProfile."""

    def test_neutral_lut_is_identity(self):
        assert ToneProfile.neutral().to_lut().is_identity(1e-6)
        assert ToneProfile.neutral().to_inverse_lut().is_identity(1e-6)

    def test_lut_maps_to_points(self):
        tone = ChannelTone(50, 200, 1.0)
        lut = ToneProfile(tone, tone, tone).to_lut()
        assert lut.r[0] == pytest.approx(50 / 255, abs=1e-6)
        assert lut.r[255] == pytest.approx(200 / 255, abs=1e-6)

    def test_inverse_cancels_profile(self):
        tone = ChannelTone(30, 220, 1.2)
        profile = ToneProfile(tone, tone, tone)
        roundtrip = compose(profile.to_lut(), profile.to_inverse_lut())
        assert roundtrip.r[0] == pytest.approx(0.0, abs=1e-6)
        assert roundtrip.r[127] == pytest.approx(127 / 255, abs=0.02)
        assert roundtrip.r[255] == pytest.approx(1.0, abs=1e-6)

    def test_degenerate_inverse_is_linear(self):
        np.testing.assert_allclose(
            ChannelTone(100, 100, 1.0).to_inverse_lut(), np.arange(256) / 255, atol=1e-6
        )

    def test_transfer_from_neutral(self):
        """Transferring from the neutral profile equals the target's own LUT."""
        tone = ChannelTone(20, 230, 0.9)
        target = ToneProfile(tone, tone, tone)
        transfer = create_transfer_lut(ToneProfile.neutral(), target)
        np.testing.assert_allclose(transfer.r, target.to_lut().r, atol=1e-3)

    def test_transfer_stretches_range(self):
        image = _grey_row(np.arange(50, 201))
        source = ToneProfile.extract(image, percentile=0)
        out = create_transfer_lut(source, ToneProfile.neutral()).apply(image)
        assert out.min() == 0
        assert out.max() == 255
