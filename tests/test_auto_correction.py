"""Tests for the combined two-phase auto correction."""

import numpy as np
import pytest

from gradelut.correction import auto
from gradelut.correction.auto import AutoCorrectionResult, HistogramData, histogram_data_from_image
from gradelut.correction.contrast import ContrastResult
from gradelut.correction.exposure import ExposureResult
from gradelut.correction.saturation import SaturationResult
from gradelut.correction.white_balance import WhiteBalanceResult
from gradelut.lut import Lut1D, Lut3D


def _solid(rgb, shape=(8, 8)):
    return np.tile(np.array(rgb, dtype=np.uint8), shape + (1,))


def _result(exposure, contrast, wb, saturation):
    return AutoCorrectionResult(
        exposure=exposure,
        contrast=contrast,
        wb=wb,
        saturation=saturation,
        phase1_lut=Lut1D.identity(),
        phase2_lut3d=Lut3D.identity(2),
    )


class TestHistogramData:
    """Test histogram collection."""

    def test_from_image(self):
        data = histogram_data_from_image(_solid((100, 120, 140)))
        assert isinstance(data, HistogramData)
        assert data.r[100] == 64
        assert data.g[120] == 64
        assert data.b[140] == 64
        assert data.luminance.sum() == 64

    def test_rgba_accepted(self):
        data = histogram_data_from_image(_solid((10, 20, 30, 255)))
        assert data.r.sum() == 64

    def test_estimates(self):
        data = histogram_data_from_image(_solid((100, 120, 140)))
        neutral = auto.estimate_neutral_stats(data)
        assert neutral.median_rgb == pytest.approx((100 / 255, 120 / 255, 140 / 255))
        assert neutral.confidence == "medium"
        sat = auto.estimate_saturation_stats(data)
        assert sat.p95_proxy == pytest.approx(40 / 255)


class TestCompute:
    """Test the full auto correction."""

    def test_dark_image_brightened(self):
        image = _solid((77, 77, 77))
        lut, result = auto.create_lut_from_original(histogram_data_from_image(image))
        assert isinstance(lut, Lut3D)
        assert lut.size == 17
        assert result.exposure.gain > 1.0
        assert lut.apply(image)[0, 0, 0] > 77

    def test_bright_image_darkened(self):
        result = auto.compute(histogram_data_from_image(_solid((204, 204, 204))))
        assert result.exposure.ev_delta < 0
        assert result.exposure.gain < 1.0

    def test_dark_image_gain(self):
        result = auto.compute(histogram_data_from_image(_solid((51, 51, 51))))
        assert result.exposure.ev_delta > 0
        assert result.exposure.gain > 1.0

    def test_grey_keeps_neutral(self):
        result = auto.compute(histogram_data_from_image(_solid((110, 110, 110))))
        assert result.wb.gain_r == pytest.approx(1.0)
        assert result.wb.gain_b == pytest.approx(1.0)
        assert result.saturation.compression_base == 0.0

    def test_colour_cast_reduced(self):
        result = auto.compute(histogram_data_from_image(_solid((100, 120, 140))))
        assert result.wb.gain_r > 1.0
        assert result.wb.gain_b < 1.0
        assert "WB: R" in auto.get_summary(result)

    def test_phase2(self):
        image = _solid((77, 77, 77))
        original = histogram_data_from_image(image)
        first = auto.compute(original)
        corrected = first.phase1_lut.apply(image)
        lut, result = auto.create_lut_with_phase2(original, histogram_data_from_image(corrected), size=9)
        assert lut.size == 9
        assert result.exposure == first.exposure
        assert result.phase2_lut3d.size == 17

    def test_to_lut3d_matches_phases(self):
        image = _solid((40, 60, 90))
        result = auto.compute(histogram_data_from_image(image))
        combined = auto.to_lut3d(result, 33).apply(image).astype(int)
        staged = result.phase2_lut3d.apply(result.phase1_lut.apply(image)).astype(int)
        assert np.abs(combined - staged).max() <= 3


class TestSummary:
    """Test the correction summary string."""

    def test_no_correction(self):
        result = _result(
            ExposureResult(1.0, 0.0, 0.0, 0.6),
            ContrastResult(0.0, 0.0, 0.0, 0.4),
            WhiteBalanceResult(),
            SaturationResult(0.0, 0.0, 0.0, 0.5, True, "noCompression", 0.1, 0.3),
        )
        assert auto.get_summary(result) == "No correction"

    def test_all_tokens(self):
        result = _result(
            ExposureResult(1.2, 0.5, 0.35, 0.6),
            ContrastResult(0.1, 0.05, 0.021, 0.4),
            WhiteBalanceResult(gain_r=1.02, gain_b=0.98),
            SaturationResult(0.1, 0.5, 0.05, 0.5, False, "none", 0.1, 0.3),
        )
        assert auto.get_summary(result) == "Exp: +0.35EV → Con: +2.1% → WB: R1.02 B0.98 → Sat: -5.0%"

    def test_negative_exposure(self):
        result = _result(
            ExposureResult(0.9, -0.4, -0.25, 0.6),
            ContrastResult(0.0, 0.0, 0.0, 0.4),
            WhiteBalanceResult(),
            SaturationResult(0.0, 0.0, 0.0, 0.5, True, "noCompression", 0.1, 0.3),
        )
        assert auto.get_summary(result) == "Exp: -0.25EV"
