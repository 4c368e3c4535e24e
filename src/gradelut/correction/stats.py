"""Shared image statistics for the auto-correction stages.

An image is analysed once; every stage (exposure, contrast, white balance,
saturation) then reads the same statistics. The statistics are meant as
safety rails and rough correction estimates, not scene understanding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from gradelut.image import as_pixels, rgb_float
from gradelut.luminance.kernels import histogram_256_numba

logger = logging.getLogger(__name__)

HIST_SIZE = 256

Confidence = Literal["high", "medium", "low", "none"]

# Rec.709 luma weights
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


@dataclass(frozen=True)
class LuminanceStats:
    """Percentile summary of a luminance histogram (values in [0, 1]).

    Attributes:
        p01, p10, p50, p90, p99: Percentiles
        clip_black: Share of pixels at the black end
        clip_white: Share of pixels at the white end
        range: p90 - p10
        mid_ratio: Share of pixels with luminance in [0.3, 0.7]
    """

    p01: float = 0.0
    p10: float = 0.0
    p50: float = 0.5
    p90: float = 1.0
    p99: float = 1.0
    clip_black: float = 0.0
    clip_white: float = 0.0
    range: float = 1.0
    mid_ratio: float = 0.4

    @property
    def total_clip(self) -> float:
        return self.clip_black + self.clip_white


@dataclass(frozen=True)
class NeutralStats:
    """Near-grey pixel candidates used for white balance.

    Attributes:
        count: Number of candidates
        ratio: count / total pixels
        median_rgb: Per-channel median of the candidates in [0, 1]
        confidence: Derived from ratio
    """

    count: int = 0
    ratio: float = 0.0
    median_rgb: tuple[float, float, float] = (1.0, 1.0, 1.0)
    confidence: Confidence = "none"


@dataclass(frozen=True)
class SaturationStats:
    """Distribution of the chroma proxy max(R,G,B) - min(R,G,B)."""

    p95_proxy: float = 0.0
    p99_proxy: float = 0.0
    mean_proxy: float = 0.0


@dataclass(frozen=True)
class ImageClassification:
    is_low_key: bool = False
    is_high_key: bool = False
    is_low_contrast: bool = False
    is_high_contrast: bool = False
    has_significant_clipping: bool = False
    is_extreme_scene: bool = False


@dataclass(frozen=True)
class AutoCorrectionStats:
    luminance: LuminanceStats = field(default_factory=LuminanceStats)
    neutral: NeutralStats = field(default_factory=NeutralStats)
    saturation: SaturationStats = field(default_factory=SaturationStats)
    classification: ImageClassification = field(default_factory=ImageClassification)


@dataclass(frozen=True)
class AnalysisParams:
    """Thresholds used by :func:`analyze`.

    Attributes:
        black_clip_threshold: Luminance at or below which a pixel counts as clipped black
        white_clip_threshold: Luminance at or above which a pixel counts as clipped white
        mid_lo: Lower bound of the mid-tone band
        mid_hi: Upper bound of the mid-tone band
        neutral_y_lo: Minimum luminance of a neutral candidate
        neutral_y_hi: Maximum luminance of a neutral candidate
        neutral_chroma_thresh: Chroma proxy below which a pixel is neutral
    """

    black_clip_threshold: float = 0.01
    white_clip_threshold: float = 0.99
    mid_lo: float = 0.30
    mid_hi: float = 0.70
    neutral_y_lo: float = 0.15
    neutral_y_hi: float = 0.85
    neutral_chroma_thresh: float = 0.08


DEFAULT_ANALYSIS_PARAMS = AnalysisParams()


def _bin(value: float) -> int:
    return int(np.floor(value * 255.0 + 0.5))


def histogram_percentile(histogram: np.ndarray, p: float, total: float | None = None) -> float:
    """First bin whose cumulative count reaches ``p * total``, as a value in [0, 1].

    :param histogram: Counts [256]
    :param p: Fraction in [0, 1]
    :param total: Total count (defaults to the histogram sum)
    :returns: Bin / 255, or 1.0 when never reached
    """
    histogram = np.asarray(histogram)
    if total is None:
        total = float(histogram.sum())
    hits = np.nonzero(np.cumsum(histogram) >= total * p)[0]
    return float(hits[0]) / (HIST_SIZE - 1) if hits.size else 1.0


def compute_luminance_stats(
    histogram: np.ndarray,
    total: int,
    mid_count: int,
    params: AnalysisParams = DEFAULT_ANALYSIS_PARAMS,
) -> LuminanceStats:
    """Percentiles, clipping and mid-tone share of a luminance histogram."""
    if total == 0:
        return LuminanceStats()

    p01, p10, p50, p90, p99 = (
        histogram_percentile(histogram, p, total) for p in (0.01, 0.10, 0.50, 0.90, 0.99)
    )
    black_bin = _bin(params.black_clip_threshold)
    white_bin = _bin(params.white_clip_threshold)
    return LuminanceStats(
        p01=p01,
        p10=p10,
        p50=p50,
        p90=p90,
        p99=p99,
        clip_black=float(histogram[: black_bin + 1].sum()) / total,
        clip_white=float(histogram[white_bin:].sum()) / total,
        range=p90 - p10,
        mid_ratio=mid_count / total,
    )


def compute_neutral_stats(candidates: np.ndarray, total_pixels: int) -> NeutralStats:
    """Median colour and confidence of near-grey candidate pixels.

    :param candidates: Candidate colours [M, 3] in [0, 1]
    :param total_pixels: Number of analysed pixels
    """
    count = int(candidates.shape[0])
    if count == 0:
        return NeutralStats()

    ratio = count / total_pixels
    # Upper median, matching sorted[count // 2]
    median = np.sort(candidates, axis=0)[count // 2]

    if ratio >= 0.05:
        confidence = "high"
    elif ratio >= 0.02:
        confidence = "medium"
    elif ratio >= 0.005:
        confidence = "low"
    else:
        confidence = "none"

    return NeutralStats(
        count=count,
        ratio=ratio,
        median_rgb=(float(median[0]), float(median[1]), float(median[2])),
        confidence=confidence,
    )


def compute_saturation_stats(histogram: np.ndarray, total: int, proxy_sum: float) -> SaturationStats:
    if total == 0:
        return SaturationStats()
    return SaturationStats(
        p95_proxy=histogram_percentile(histogram, 0.95, total),
        p99_proxy=histogram_percentile(histogram, 0.99, total),
        mean_proxy=proxy_sum / total,
    )


def classify(luminance: LuminanceStats) -> ImageClassification:
    """Derive coarse scene flags from luminance statistics."""
    clip = luminance.total_clip
    return ImageClassification(
        is_low_key=luminance.p50 < 0.25 and luminance.p90 < 0.55,
        is_high_key=luminance.p50 > 0.75 and luminance.p10 > 0.45,
        is_low_contrast=luminance.range < 0.25,
        is_high_contrast=luminance.range > 0.75 or clip > 0.05,
        has_significant_clipping=clip > 0.05,
        is_extreme_scene=luminance.mid_ratio < 0.2 or clip > 0.1,
    )


def analyze(image: np.ndarray, params: AnalysisParams = DEFAULT_ANALYSIS_PARAMS) -> AutoCorrectionStats:
    """Analyse an 8-bit image in one pass.

    :param image: uint8 [H, W, 3|4] or [N, 3|4]
    :param params: Analysis thresholds
    :returns: Combined statistics
    """
    pixels = as_pixels(image)
    total = pixels.shape[0]
    rgb = rgb_float(pixels)

    y = np.ascontiguousarray(rgb @ LUMA_WEIGHTS)
    proxy = np.ascontiguousarray(rgb.max(axis=1) - rgb.min(axis=1))

    luma_hist = np.zeros(HIST_SIZE, dtype=np.int64)
    histogram_256_numba(y, luma_hist)
    sat_hist = np.zeros(HIST_SIZE, dtype=np.int64)
    histogram_256_numba(proxy, sat_hist)

    mid_count = int(luma_hist[_bin(params.mid_lo) : _bin(params.mid_hi) + 1].sum())
    neutral_mask = (
        (y >= params.neutral_y_lo) & (y <= params.neutral_y_hi) & (proxy < params.neutral_chroma_thresh)
    )

    luminance = compute_luminance_stats(luma_hist, total, mid_count, params)
    neutral = compute_neutral_stats(rgb[neutral_mask], total)
    saturation = compute_saturation_stats(sat_hist, total, float(proxy.sum()))
    classification = classify(luminance)
    logger.debug(
        "Analysed %d pixels: p50=%.3f range=%.3f neutral=%s",
        total,
        luminance.p50,
        luminance.range,
        neutral.confidence,
    )
    return AutoCorrectionStats(luminance, neutral, saturation, classification)


def analyze_from_histogram(
    histogram: np.ndarray,
    params: AnalysisParams = DEFAULT_ANALYSIS_PARAMS,
) -> tuple[LuminanceStats, ImageClassification]:
    """Luminance statistics and classification from a 256-bin histogram."""
    histogram = np.asarray(histogram)
    total = int(histogram.sum())
    mid_count = int(histogram[_bin(params.mid_lo) : _bin(params.mid_hi) + 1].sum())
    luminance = compute_luminance_stats(histogram, total, mid_count, params)
    return luminance, classify(luminance)


def empty_stats() -> AutoCorrectionStats:
    return AutoCorrectionStats()
