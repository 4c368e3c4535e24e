"""Combined two-phase auto correction.

Phase 1 decides exposure and contrast from the original image. Phase 2
decides white balance and saturation, ideally from statistics measured
after phase 1 was applied. Both phases are baked into one 3D LUT.

Example:
    >>> original = histogram_data_from_image(image)
    >>> result = compute(original)
    >>> lut = to_lut3d(result)
    >>> phase1_image = result.phase1_lut.apply(image)
    >>> result = compute(original, histogram_data_from_image(phase1_image))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from gradelut.correction import contrast as contrast_correction
from gradelut.correction import exposure as exposure_correction
from gradelut.correction import saturation as saturation_correction
from gradelut.correction import white_balance as wb_correction
from gradelut.correction.contrast import ContrastResult
from gradelut.correction.exposure import ExposureResult
from gradelut.correction.saturation import SaturationResult
from gradelut.correction.stats import HIST_SIZE, LUMA_WEIGHTS, NeutralStats, SaturationStats
from gradelut.correction.white_balance import WhiteBalanceResult
from gradelut.image import as_pixels, rgb_float
from gradelut.luminance.kernels import histogram_256_numba
from gradelut.lut.lut1d import Lut1D
from gradelut.lut.lut3d import DEFAULT_SIZE, Lut3D
from gradelut.lut.lut3d import compose as compose_3d

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistogramData:
    """256-bin histograms of one image.

    Attributes:
        luminance: Luma histogram
        r: Red channel histogram
        g: Green channel histogram
        b: Blue channel histogram
    """

    luminance: np.ndarray
    r: np.ndarray
    g: np.ndarray
    b: np.ndarray


@dataclass(frozen=True)
class AutoCorrectionResult:
    """Per-stage results and the LUTs of both phases."""

    exposure: ExposureResult
    contrast: ContrastResult
    wb: WhiteBalanceResult
    saturation: SaturationResult
    phase1_lut: Lut1D
    phase2_lut3d: Lut3D


def histogram_data_from_image(image: np.ndarray) -> HistogramData:
    """Measure luma and per-channel histograms of an 8-bit image.

    :param image: uint8 [H, W, 3|4] or [N, 3|4]
    """
    pixels = as_pixels(image)
    luma = np.ascontiguousarray(rgb_float(pixels) @ LUMA_WEIGHTS)
    luminance = np.zeros(HIST_SIZE, dtype=np.int64)
    histogram_256_numba(luma, luminance)
    r, g, b = (np.bincount(pixels[:, c], minlength=HIST_SIZE).astype(np.int64) for c in range(3))
    return HistogramData(luminance, r, g, b)


def _hist_percentile(histogram: np.ndarray, p: float) -> float:
    histogram = np.asarray(histogram)
    total = float(histogram.sum())
    if total == 0:
        return 0.5
    hits = np.nonzero(np.cumsum(histogram) >= total * p)[0]
    return float(hits[0]) / (HIST_SIZE - 1) if hits.size else 0.5


def estimate_neutral_stats(histogram: HistogramData) -> NeutralStats:
    """Approximate neutral statistics from per-channel medians."""
    return NeutralStats(
        count=1000,
        ratio=0.1,
        median_rgb=(
            _hist_percentile(histogram.r, 0.5),
            _hist_percentile(histogram.g, 0.5),
            _hist_percentile(histogram.b, 0.5),
        ),
        confidence="medium",
    )


def estimate_saturation_stats(histogram: HistogramData) -> SaturationStats:
    """Approximate the chroma proxy from the spread of channel percentiles."""

    def spread(p: float) -> float:
        values = [_hist_percentile(h, p) for h in (histogram.r, histogram.g, histogram.b)]
        return max(values) - min(values)

    return SaturationStats(p95_proxy=spread(0.95), p99_proxy=spread(0.99), mean_proxy=spread(0.5))


def compute(original: HistogramData, phase2: HistogramData | None = None) -> AutoCorrectionResult:
    """Compute the full auto correction.

    :param original: Histograms of the original image
    :param phase2: Histograms after phase 1 was applied (defaults to original)
    :returns: AutoCorrectionResult
    """
    stats0 = exposure_correction.compute_stats(original.luminance)
    exposure = exposure_correction.compute(stats0)
    contrast = contrast_correction.compute(stats0)
    phase1_lut = Lut1D.compose(
        exposure_correction.to_lut(exposure), contrast_correction.to_lut(contrast)
    )

    source = phase2 if phase2 is not None else original
    stats1 = exposure_correction.compute_stats(source.luminance)
    wb = wb_correction.compute(estimate_neutral_stats(source), stats1)
    saturation = saturation_correction.compute(estimate_saturation_stats(source), stats1)

    wb_lut3d = Lut3D.from_lut1d(wb_correction.to_lut(wb), DEFAULT_SIZE)
    phase2_lut3d = compose_3d(wb_lut3d, saturation_correction.to_lut3d(saturation, DEFAULT_SIZE))

    logger.debug(
        "Auto correction (%s phase 2): %s",
        "measured" if phase2 is not None else "estimated",
        _summary(exposure, contrast, wb, saturation),
    )
    return AutoCorrectionResult(exposure, contrast, wb, saturation, phase1_lut, phase2_lut3d)


def to_lut3d(result: AutoCorrectionResult, size: int = DEFAULT_SIZE) -> Lut3D:
    """Bake phase 1 (1D) followed by phase 2 (3D) into one grid."""
    return compose_3d(Lut3D.from_lut1d(result.phase1_lut, size), result.phase2_lut3d)


def create_lut_from_original(
    original: HistogramData, size: int = DEFAULT_SIZE
) -> tuple[Lut3D, AutoCorrectionResult]:
    """Single-pass variant: phase 2 reuses the original statistics."""
    result = compute(original)
    return to_lut3d(result, size), result


def create_lut_with_phase2(
    original: HistogramData, phase2: HistogramData, size: int = DEFAULT_SIZE
) -> tuple[Lut3D, AutoCorrectionResult]:
    result = compute(original, phase2)
    return to_lut3d(result, size), result


def _summary(
    exposure: ExposureResult,
    contrast: ContrastResult,
    wb: WhiteBalanceResult,
    saturation: SaturationResult,
) -> str:
    parts = []
    if abs(exposure.applied_ev_delta) > 0.01:
        parts.append(f"Exp: {exposure.applied_ev_delta:+.2f}EV")
    if abs(contrast.amount) > 0.001:
        parts.append(f"Con: {contrast.amount * 100:+.1f}%")
    if abs(wb.gain_r - 1) > 0.01 or abs(wb.gain_b - 1) > 0.01:
        parts.append(f"WB: R{wb.gain_r:.2f} B{wb.gain_b:.2f}")
    if saturation.compression_base > 0.01:
        parts.append(f"Sat: -{saturation.compression_base * 100:.1f}%")
    return " → ".join(parts) if parts else "No correction"


def get_summary(result: AutoCorrectionResult) -> str:
    """Short description of the non-trivial corrections, e.g. ``Exp: +0.35EV → Con: +2.1%``."""
    return _summary(result.exposure, result.contrast, result.wb, result.saturation)
