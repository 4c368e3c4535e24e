"""Descriptive statistics of an 8-bit image.

``analyze`` summarises an image for display and diagnostics. It reports
histogram moments, dynamic range and key, three tonal zones, HSL
saturation and clipping. The auto-correction stages use the leaner
statistics in :mod:`gradelut.correction.stats` instead.

Example:
    >>> report = analyze(image)
    >>> report.dynamic_range.key, report.clipping.total_clipped_percent
    ('low', 0.02)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from gradelut.color.hsl import rgb_to_hsl
from gradelut.image import as_pixels, rgb_float
from gradelut.luminance.kernels import histogram_256_numba
from gradelut.luminance.profile import LUT_SIZE, detect_black_white_points

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])

# Inclusive luma bounds of the shadow, midtone and highlight zones
ZONE_BOUNDS = ((0, 85), (86, 170), (171, 255))

LOW_KEY_THRESHOLD = 0.35
HIGH_KEY_THRESHOLD = 0.65

Key = Literal["low", "normal", "high"]


# =============================================================================
# Result types
# =============================================================================


@dataclass(frozen=True)
class HistogramStats:
    """Moments of a 256-bin histogram, in levels (0-255).

    Attributes:
        mean: Mean level
        median: First level where the cumulative count reaches half
        std_dev: Population standard deviation
        skewness: Third standardised moment; positive for dark images
    """

    mean: float = 0.0
    median: int = 0
    std_dev: float = 0.0
    skewness: float = 0.0


@dataclass(frozen=True)
class DynamicRange:
    """Tonal extent of the luma histogram.

    Attributes:
        contrast_ratio: white / black point (255 for a zero black point)
        range: white point minus black point, at the 1% percentile
        key: "low", "normal" or "high"
        key_value: Mean luma in [0, 1]
    """

    contrast_ratio: float
    range: int
    key: Key
    key_value: float


@dataclass(frozen=True)
class ZoneStats:
    """Share and mean level of one tonal zone."""

    range: tuple[int, int]
    percentage: float
    mean: float


@dataclass(frozen=True)
class TonalZones:
    shadows: ZoneStats
    midtones: ZoneStats
    highlights: ZoneStats


@dataclass(frozen=True)
class SaturationSummary:
    """HSL saturation distribution.

    Attributes:
        mean: Mean saturation in [0, 1]
        median: Median saturation in [0, 1]
        std_dev: Population standard deviation
        histogram: 256-bin histogram of saturation, int64
    """

    mean: float
    median: float
    std_dev: float
    histogram: np.ndarray


@dataclass(frozen=True)
class ChannelClipping:
    black: int = 0
    white: int = 0


@dataclass(frozen=True)
class ClippingInfo:
    """Pixels at the ends of the range.

    A pixel is black (white) clipped only when all three channels are 0
    (255). Per-channel counts are kept separately.
    """

    black_clipped: int
    black_clipped_percent: float
    white_clipped: int
    white_clipped_percent: float
    total_clipped_percent: float
    r: ChannelClipping
    g: ChannelClipping
    b: ChannelClipping


@dataclass(frozen=True)
class ImageAnalysis:
    """Full report returned by :func:`analyze`."""

    luminance: HistogramStats
    dynamic_range: DynamicRange
    tonal_zones: TonalZones
    saturation: SaturationSummary
    clipping: ClippingInfo
    r: HistogramStats
    g: HistogramStats
    b: HistogramStats


# =============================================================================
# Helpers
# =============================================================================


def histogram_stats(histogram: np.ndarray) -> HistogramStats:
    """Mean, median, standard deviation and skewness of a histogram.

    :param histogram: Counts [256]
    :returns: HistogramStats; all zero for an empty histogram
    """
    histogram = np.asarray(histogram, dtype=np.float64)
    total = histogram.sum()
    if total == 0:
        return HistogramStats()

    levels = np.arange(histogram.shape[0], dtype=np.float64)
    mean = float(levels @ histogram) / total
    median = int(np.argmax(np.cumsum(histogram) >= total / 2))
    diff = levels - mean
    std_dev = float(np.sqrt((diff**2 @ histogram) / total))
    skewness = float((diff**3 @ histogram) / total) / std_dev**3 if std_dev > 0 else 0.0
    return HistogramStats(mean, median, std_dev, skewness)


def dynamic_range(luma_histogram: np.ndarray, mean_level: float) -> DynamicRange:
    """Black/white points at the 1% percentile and the key from the mean level."""
    total = int(np.sum(luma_histogram))
    black, white = detect_black_white_points(luma_histogram, total, 1.0)
    if black > 0:
        contrast_ratio = white / black
    else:
        contrast_ratio = 255.0 if white > 0 else 1.0

    key_value = mean_level / 255.0
    if key_value < LOW_KEY_THRESHOLD:
        key = "low"
    elif key_value > HIGH_KEY_THRESHOLD:
        key = "high"
    else:
        key = "normal"
    return DynamicRange(float(contrast_ratio), white - black, key, key_value)


def tonal_zones(luma_histogram: np.ndarray) -> TonalZones:
    """Share of pixels and mean level in each of ZONE_BOUNDS.

    An empty zone reports the middle of its range as its mean.
    """
    histogram = np.asarray(luma_histogram, dtype=np.float64)
    total = histogram.sum()
    zones = []
    for lo, hi in ZONE_BOUNDS:
        counts = histogram[lo : hi + 1]
        count = counts.sum()
        mean = float(np.arange(lo, hi + 1) @ counts) / count if count > 0 else (lo + hi) / 2
        zones.append(ZoneStats((lo, hi), float(count / total) if total > 0 else 0.0, mean))
    return TonalZones(*zones)


def saturation_summary(saturation: np.ndarray) -> SaturationSummary:
    hist = np.bincount(
        np.minimum(255, np.floor(saturation * 255.0 + 0.5).astype(np.int64)), minlength=LUT_SIZE
    ).astype(np.int64)
    if saturation.size == 0:
        return SaturationSummary(0.0, 0.0, 0.0, hist)
    return SaturationSummary(
        float(saturation.mean()), float(np.median(saturation)), float(saturation.std()), hist
    )


def clipping_info(pixels: np.ndarray) -> ClippingInfo:
    rgb = pixels[:, :3]
    total = rgb.shape[0]
    black = int(np.count_nonzero(np.all(rgb == 0, axis=1)))
    white = int(np.count_nonzero(np.all(rgb == 255, axis=1)))
    per_channel = [
        ChannelClipping(int(np.count_nonzero(rgb[:, c] == 0)), int(np.count_nonzero(rgb[:, c] == 255)))
        for c in range(3)
    ]

    def share(n: int) -> float:
        return n / total if total > 0 else 0.0

    return ClippingInfo(
        black_clipped=black,
        black_clipped_percent=share(black),
        white_clipped=white,
        white_clipped_percent=share(white),
        total_clipped_percent=share(black + white),
        r=per_channel[0],
        g=per_channel[1],
        b=per_channel[2],
    )


# =============================================================================
# Analysis
# =============================================================================


def analyze(image: np.ndarray) -> ImageAnalysis:
    """Analyse an 8-bit image.

    Luma is Rec.709 rounded to the nearest level. Saturation is HSL
    saturation.

    :param image: uint8 [H, W, 3|4] or [N, 3|4]
    :returns: ImageAnalysis
    """
    pixels = as_pixels(image)
    rgb = rgb_float(pixels)

    luma_histogram = np.zeros(LUT_SIZE, dtype=np.int64)
    histogram_256_numba(np.ascontiguousarray(rgb @ LUMA_WEIGHTS), luma_histogram)
    luminance = histogram_stats(luma_histogram)
    _, saturation, _ = rgb_to_hsl(rgb)

    r, g, b = (histogram_stats(np.bincount(pixels[:, c], minlength=LUT_SIZE)) for c in range(3))
    report = ImageAnalysis(
        luminance=luminance,
        dynamic_range=dynamic_range(luma_histogram, luminance.mean),
        tonal_zones=tonal_zones(luma_histogram),
        saturation=saturation_summary(saturation),
        clipping=clipping_info(pixels),
        r=r,
        g=g,
        b=b,
    )
    logger.debug(
        "Analysed %d pixels: mean=%.1f key=%s clipped=%.3f",
        pixels.shape[0],
        luminance.mean,
        report.dynamic_range.key,
        report.clipping.total_clipped_percent,
    )
    return report
