"""Automatic exposure correction.

Pulls the median luminance toward a target rather than matching it: the
EV difference is computed in log2 space, softly limited with tanh, then
blended toward 1 by a strength factor.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

import numpy as np

from gradelut.correction.stats import (
    HIST_SIZE,
    ImageClassification,
    LuminanceStats,
    classify,
    histogram_percentile,
)
from gradelut.lut.lut1d import Lut1D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExposureParams:
    """Exposure correction parameters.

    Attributes:
        target_y50: Target median luminance (0-1)
        max_ev: Maximum correction in EV stops
        strength: Blend factor toward the full gain (0-1)
    """

    target_y50: float = 0.45
    max_ev: float = 0.7
    strength: float = 0.6


DEFAULT_EXPOSURE_PARAMS = ExposureParams()


@dataclass(frozen=True)
class ExposureResult:
    """Computed exposure correction.

    Attributes:
        gain: Linear multiplier applied to every channel
        ev_delta: Raw EV difference to the target
        applied_ev_delta: EV difference after tanh limiting
        effective_strength: Strength after classification guards
    """

    gain: float
    ev_delta: float
    applied_ev_delta: float
    effective_strength: float


def compute_stats(histogram: np.ndarray) -> LuminanceStats:
    """Luminance statistics from a 256-bin histogram.

    Clipping here counts only the two end bins.
    """
    histogram = np.asarray(histogram)
    total = int(histogram.sum())
    if total == 0:
        return LuminanceStats()

    p01, p10, p50, p90, p99 = (
        histogram_percentile(histogram, p, total) for p in (0.01, 0.10, 0.50, 0.90, 0.99)
    )
    mid_low = int(np.floor(0.3 * 255 + 0.5))
    mid_high = int(np.floor(0.7 * 255 + 0.5))
    return LuminanceStats(
        p01=p01,
        p10=p10,
        p50=p50,
        p90=p90,
        p99=p99,
        clip_black=float(histogram[0]) / total,
        clip_white=float(histogram[HIST_SIZE - 1]) / total,
        range=p90 - p10,
        mid_ratio=float(histogram[mid_low : mid_high + 1].sum()) / total,
    )


def adjust_params(params: ExposureParams, classification: ImageClassification) -> ExposureParams:
    """Weaken the correction for low-key, high-key and clipped images."""
    max_ev = params.max_ev
    strength = params.strength
    if classification.is_low_key:
        strength *= 0.5
        max_ev = min(max_ev, 0.3)
    if classification.is_high_key:
        strength *= 0.5
        max_ev = min(max_ev, 0.3)
    if classification.has_significant_clipping:
        strength *= 0.7
    return replace(params, max_ev=max_ev, strength=strength)


def compute(stats: LuminanceStats, params: ExposureParams = DEFAULT_EXPOSURE_PARAMS) -> ExposureResult:
    """Compute the exposure gain for an image.

    :param stats: Luminance statistics of the image
    :param params: Correction parameters
    :returns: ExposureResult; gain is 1 for an all-black median
    """
    adjusted = adjust_params(params, classify(stats))
    if stats.p50 <= 0.001:
        return ExposureResult(1.0, 0.0, 0.0, adjusted.strength)

    ev_delta = math.log2(adjusted.target_y50 / stats.p50)
    applied = adjusted.max_ev * math.tanh(ev_delta / adjusted.max_ev)
    gain = 1.0 + (2.0**applied - 1.0) * adjusted.strength
    logger.debug(
        "Exposure: p50=%.3f ev=%.3f applied=%.3f gain=%.4f", stats.p50, ev_delta, applied, gain
    )
    return ExposureResult(gain, ev_delta, applied, adjusted.strength)


def to_lut(result: ExposureResult) -> Lut1D:
    """Gain LUT, identical on all channels."""
    x = np.arange(HIST_SIZE, dtype=np.float64) / (HIST_SIZE - 1)
    return Lut1D.from_master(np.clip(x * result.gain, 0.0, 1.0))


def create_lut_from_histogram(
    histogram: np.ndarray,
    params: ExposureParams = DEFAULT_EXPOSURE_PARAMS,
) -> tuple[Lut1D, ExposureResult, LuminanceStats]:
    """Statistics, correction and LUT in one call.

    :returns: Tuple of (lut, result, stats)
    """
    stats = compute_stats(histogram)
    result = compute(stats, params)
    return to_lut(result), result, stats
