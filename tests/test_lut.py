"""Tests for 1D and 3D lookup tables."""

import numpy as np
import pytest

from gradelut.lut import (
    Lut1D,
    Lut3D,
    QuantizedLut,
    compose,
    compose_3d,
    compose_channel,
    compose_quantized,
    identity_channel,
    lookup,
    quantize_channel,
)


@pytest.fixture
def image():
    """Small RGB test image covering the full range."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)


@pytest.fixture
def rgba_image():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(100, 4), dtype=np.uint8)


def _gamma_lut(gamma):
    return Lut1D.from_master(identity_channel() ** gamma)


class TestChannels:
    """Test single-channel helpers."""

    def test_identity_channel(self):
        ch = identity_channel()
        assert ch.dtype == np.float32
        assert ch[0] == 0.0
        assert ch[255] == 1.0

    def test_quantize_rounds_to_nearest(self):
        assert quantize_channel(np.full(256, 0.6 / 255.0))[0] == 1
        assert quantize_channel(np.full(256, 0.4 / 255.0))[0] == 0
        np.testing.assert_array_equal(quantize_channel(identity_channel()), np.arange(256))

    def test_quantize_clamps(self):
        ch = np.linspace(-1.0, 2.0, 256)
        q = quantize_channel(ch)
        assert q[0] == 0
        assert q[-1] == 255

    def test_compose_with_identity(self):
        ch = identity_channel() ** 2
        np.testing.assert_allclose(compose_channel(identity_channel(), ch), ch, atol=1e-6)
        np.testing.assert_allclose(compose_channel(ch, identity_channel()), ch, atol=1e-6)


class TestLut1D:
    """Test the float per-channel LUT."""

    def test_identity(self):
        lut = Lut1D.identity()
        assert lut.is_identity()
        for ch in lut.channels:
            assert ch.dtype == np.float32

    def test_wrong_shape_rejected(self):
        with pytest.raises(ValueError, match="shape"):
            Lut1D(np.zeros(10), np.zeros(256), np.zeros(256))

    def test_channels_read_only(self):
        lut = Lut1D.identity()
        with pytest.raises(ValueError):
            lut.r[0] = 0.5

    def test_input_not_frozen(self):
        """Constructing a LUT never freezes the caller's array."""
        source = identity_channel()
        Lut1D.from_master(source, share=True)
        source[0] = 0.25
        assert source[0] == 0.25

    def test_from_master_share(self):
        shared = Lut1D.from_master(identity_channel(), share=True)
        assert shared.r is shared.g is shared.b
        separate = Lut1D.from_master(identity_channel())
        assert separate.r is not separate.g

    def test_compose_order(self):
        """compose(a, b) applies a first."""
        a = Lut1D(identity_channel() * 0.5, identity_channel(), identity_channel())
        b = Lut1D.from_master(identity_channel() ** 2)
        composed = compose(a, b)
        assert composed.r[255] == pytest.approx(0.25, abs=1e-3)
        reverse = compose(b, a)
        assert reverse.r[255] == pytest.approx(0.5, abs=1e-3)

    def test_compose_empty_is_identity(self):
        assert compose().is_identity()

    def test_compose_classmethod_and_then(self):
        a, b = _gamma_lut(2.0), _gamma_lut(0.5)
        via_class = Lut1D.compose(a, b)
        via_then = a.then(b)
        np.testing.assert_array_equal(via_class.g, via_then.g)
        # x^2 then sqrt is close to identity away from black
        np.testing.assert_allclose(via_class.g[64:], identity_channel()[64:], atol=5e-3)

    def test_compose_associative(self):
        a = _gamma_lut(2.2)
        b = Lut1D(identity_channel() * 0.8, identity_channel(), np.sqrt(identity_channel()))
        c = _gamma_lut(0.6)
        left = compose(compose(a, b), c).quantize()
        right = compose(a, compose(b, c)).quantize()
        for l_ch, r_ch in zip(left.channels, right.channels):
            assert np.abs(l_ch.astype(int) - r_ch.astype(int)).max() <= 1

    def test_quantize(self):
        q = Lut1D.identity().quantize()
        assert isinstance(q, QuantizedLut)
        np.testing.assert_array_equal(q.r, np.arange(256))

    def test_apply_identity(self, image):
        out = Lut1D.identity().apply(image)
        assert out.shape == image.shape
        assert out.dtype == np.uint8
        np.testing.assert_array_equal(out, image)

    def test_apply_preserves_alpha(self, rgba_image):
        out = _gamma_lut(2.0).apply(rgba_image)
        np.testing.assert_array_equal(out[:, 3], rgba_image[:, 3])
        assert np.all(out[:, :3] <= rgba_image[:, :3])

    def test_apply_per_channel(self):
        lut = Lut1D(np.zeros(256), identity_channel(), np.ones(256))
        out = lut.apply(np.full((2, 2, 3), 100, dtype=np.uint8))
        np.testing.assert_array_equal(out[..., 0], 0)
        np.testing.assert_array_equal(out[..., 1], 100)
        np.testing.assert_array_equal(out[..., 2], 255)

    def test_apply_matches_quantized(self, image):
        lut = _gamma_lut(1.7)
        np.testing.assert_array_equal(lut.apply(image), lut.quantize().apply(image))

    def test_apply_rejects_float_image(self):
        with pytest.raises(ValueError, match="uint8"):
            Lut1D.identity().apply(np.zeros((4, 4, 3), dtype=np.float32))

    def test_apply_rejects_bad_channel_count(self):
        with pytest.raises(ValueError, match="shape"):
            Lut1D.identity().apply(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_apply_with_vibrance_zero(self, image):
        lut = _gamma_lut(1.2)
        np.testing.assert_array_equal(lut.apply_with_vibrance(image, 0.0), lut.apply(image))

    def test_apply_with_vibrance_keeps_grey(self):
        grey = np.full((3, 3, 4), 128, dtype=np.uint8)
        out = Lut1D.identity().apply_with_vibrance(grey, 1.0)
        np.testing.assert_array_equal(out, grey)


class TestQuantizedLut:
    """Test the 8-bit LUT."""

    def test_identity(self, image):
        np.testing.assert_array_equal(QuantizedLut.identity().apply(image), image)

    def test_compose_quantized(self):
        invert = QuantizedLut.from_master(np.arange(255, -1, -1))
        twice = compose_quantized(invert, invert)
        np.testing.assert_array_equal(twice.r, np.arange(256))
        assert QuantizedLut.compose().r[7] == 7

    def test_to_float(self):
        lut = QuantizedLut.identity().to_float()
        assert lut.is_identity(1e-6)


class TestLut3D:
    """Test the trilinear 3D LUT."""

    def test_identity_layout(self):
        """Node (r, g, b) lives at (r + g*s + b*s*s) * 3."""
        lut = Lut3D.identity(3)
        s = 3
        base = (2 + 1 * s + 0 * s * s) * 3
        np.testing.assert_allclose(lut.data[base : base + 3], [1.0, 0.5, 0.0])
        assert lut.data.shape == (27 * 3,)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Lut3D.identity(1)
        with pytest.raises(ValueError):
            Lut3D(2, np.zeros(10))

    def test_create(self):
        lut = Lut3D.create(2, Lut3D.identity(2).data)
        assert lut.is_identity()

    def test_lookup_identity(self):
        lut = Lut3D.identity(5)
        r, g, b = lookup(lut, 0.3, 0.61, 0.9)
        assert (r, g, b) == pytest.approx((0.3, 0.61, 0.9), abs=1e-6)

    def test_lookup_clamps(self):
        assert Lut3D.identity(4).lookup(-1.0, 2.0, 0.5) == pytest.approx((0.0, 1.0, 0.5), abs=1e-6)

    def test_apply_identity(self, image):
        np.testing.assert_array_equal(Lut3D.identity(17).apply(image), image)

    def test_apply_preserves_alpha(self, rgba_image):
        out = Lut3D.channel_swap(("b", "g", "r"), 5).apply(rgba_image)
        np.testing.assert_array_equal(out[:, 3], rgba_image[:, 3])

    def test_from_lut1d_matches_1d(self, image):
        lut1d = _gamma_lut(0.8)
        lut3d = Lut3D.from_lut1d(lut1d, 33)
        diff = np.abs(lut3d.apply(image).astype(int) - lut1d.apply(image).astype(int))
        assert diff.max() <= 2

    def test_channel_swap(self):
        lut = Lut3D.channel_swap(("g", "b", "r"), 5)
        assert lut.lookup(1.0, 0.5, 0.0) == pytest.approx((0.5, 0.0, 1.0), abs=1e-6)

    @pytest.mark.parametrize("mapping", [("r", "g"), ("r", "g", "x"), "rgba"])
    def test_channel_swap_invalid(self, mapping):
        with pytest.raises(ValueError):
            Lut3D.channel_swap(mapping)

    def test_hue_shift_moves_red(self):
        lut = Lut3D.hue_shift(0, 180, 40, 1.0, 17)
        r, g, b = lut.lookup(1.0, 0.0, 0.0)
        assert r < 0.1
        assert g > 0.9
        assert b > 0.9

    def test_hue_shift_leaves_far_hues(self):
        lut = Lut3D.hue_shift(0, 180, 40, 1.0, 17)
        assert lut.lookup(0.0, 0.0, 1.0) == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)

    def test_hue_shift_keeps_greys(self):
        lut = Lut3D.hue_shift(30, 200, 60, 1.0, 9)
        assert lut.lookup(0.5, 0.5, 0.5) == pytest.approx((0.5, 0.5, 0.5), abs=1e-6)

    def test_hue_saturation_desaturates(self):
        lut = Lut3D.hue_saturation(120, -1.0, 30, 5)
        r, g, b = lut.lookup(0.25, 0.75, 0.25)
        assert g - r < 0.5
        assert abs(r - b) < 1e-6

    def test_compose_identity(self):
        swap = Lut3D.channel_swap(("g", "b", "r"), 5)
        np.testing.assert_allclose(compose_3d(Lut3D.identity(5), swap).data, swap.data, atol=1e-6)
        np.testing.assert_allclose(swap.then(Lut3D.identity(9)).data, swap.data, atol=1e-6)

    def test_compose_swaps_cancel(self):
        gbr = Lut3D.channel_swap(("g", "b", "r"), 5)
        brg = Lut3D.channel_swap(("b", "r", "g"), 5)
        assert compose_3d(gbr, brg).is_identity(1e-6)

    def test_map_nodes_clips(self):
        lut = Lut3D.identity(3).map_nodes(lambda rgb: rgb * 2.0)
        assert lut.data.max() == 1.0

    def test_texture_2d(self):
        lut = Lut3D.identity(4)
        tex = lut.to_texture_2d()
        assert tex.shape == (16, 4, 4)
        assert tex.dtype == np.uint8
        np.testing.assert_array_equal(tex[..., 3], 255)
        # x = r, y = g + b * size
        np.testing.assert_array_equal(tex[1 + 2 * 4, 3, :3], [255, 85, 170])

    def test_data_read_only(self):
        with pytest.raises(ValueError):
            Lut3D.identity(2).data[0] = 1.0
