"""Perceptual luminance profile of an image.

The profile is built from the Oklab L channel only, so tone curves derived
from it never shift hue. Profiles are immutable: extract once per image
and derive LUTs from the result.

Example:
    >>> profile = LuminanceProfile.extract(image, percentile=1.0)
    >>> flatten = profile.to_fitted_inverse_lut("normalize")
    >>> flat = apply_lut(image, blend_lut(flatten, 0.5))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

import numpy as np

from gradelut.color.oklab import oklab_to_srgb, srgb_to_oklab
from gradelut.image import as_pixels, quantize, rgb_float, with_rgb
from gradelut.luminance import fitting
from gradelut.luminance.fitting import (
    DEFAULT_NORMALIZE_PARAMS,
    ControlPoint,
    NormalizeParams,
    invert_cdf,
    linear_lut,
)
from gradelut.luminance.kernels import cumulative_fraction_numba, histogram_256_numba

logger = logging.getLogger(__name__)

LUT_SIZE = 256

CurveFitType = Literal["raw", "simple", "polynomial", "spline", "normalize"]
FIT_TYPES: tuple[str, ...] = ("raw", "simple", "polynomial", "spline", "normalize")


@dataclass(frozen=True)
class LuminanceProfile:
    """Tone summary of one image.

    Attributes:
        histogram: Oklab L histogram, int64 [256]
        cdf: Cumulative distribution, float32 [256] in [0, 1]
        black_point: Detected black point (0-255)
        white_point: Detected white point (0-255)
        gamma: Estimated gamma in [0.2, 5.0]
        mean_luminance: Mean Oklab L in [0, 1]
        control_points: CDF samples at evenly spaced inputs
    """

    histogram: np.ndarray
    cdf: np.ndarray
    black_point: int
    white_point: int
    gamma: float
    mean_luminance: float
    control_points: tuple[ControlPoint, ...]

    @classmethod
    def extract(
        cls,
        image: np.ndarray,
        percentile: float = 1.0,
        num_control_points: int = 7,
    ) -> LuminanceProfile:
        """Measure the luminance profile of an 8-bit image.

        :param image: uint8 [H, W, 3|4] or [N, 3|4]
        :param percentile: Share of pixels (0-100) ignored at each end when
            detecting the black and white points
        :param num_control_points: Number of CDF samples to keep
        :returns: Profile, or the neutral profile for an empty image
        """
        pixels = as_pixels(image)
        total = pixels.shape[0]
        if total == 0:
            return cls.neutral()

        lightness = np.ascontiguousarray(srgb_to_oklab(rgb_float(pixels))[:, 0])
        histogram = np.zeros(LUT_SIZE, dtype=np.int64)
        histogram_256_numba(lightness, histogram)

        cdf = np.empty(LUT_SIZE, dtype=np.float32)
        cumulative_fraction_numba(histogram, float(total), cdf)

        mean = float(lightness.mean())
        black, white = detect_black_white_points(histogram, total, percentile)
        gamma = estimate_gamma(black, white, mean)
        logger.debug(
            "Extracted luminance profile: black=%d white=%d gamma=%.3f mean=%.3f",
            black,
            white,
            gamma,
            mean,
        )
        return cls(
            histogram=histogram,
            cdf=cdf,
            black_point=black,
            white_point=white,
            gamma=gamma,
            mean_luminance=mean,
            control_points=sample_control_points(cdf, num_control_points),
        )

    @classmethod
    def neutral(cls) -> LuminanceProfile:
        """Zero-effect profile with a linear CDF."""
        return cls(
            histogram=np.zeros(LUT_SIZE, dtype=np.int64),
            cdf=linear_lut(),
            black_point=0,
            white_point=255,
            gamma=1.0,
            mean_luminance=0.5,
            control_points=tuple(ControlPoint(v, v) for v in (0.0, 0.25, 0.5, 0.75, 1.0)),
        )

    def to_lut(self) -> np.ndarray:
        """The CDF itself as a tone LUT."""
        return self.cdf.copy()

    def to_inverse_lut(self) -> np.ndarray:
        """Flattening LUT: the inverse of the CDF."""
        return invert_cdf(self.cdf)

    def to_simple_inverse_lut(self) -> np.ndarray:
        """Gentle flattening from black point, white point and gamma only."""
        span = self.white_point - self.black_point
        if span <= 0:
            return linear_lut()
        x = np.clip((np.arange(LUT_SIZE, dtype=np.float64) - self.black_point) / span, 0.0, 1.0)
        return np.clip(np.power(x, 1.0 / self.gamma), 0.0, 1.0).astype(np.float32)

    def to_simple_lut(self) -> np.ndarray:
        """Parametric curve reproducing the profile's black, white and gamma."""
        x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
        span = (self.white_point - self.black_point) / 255.0
        y = self.black_point / 255.0 + np.power(x, self.gamma) * span
        return np.clip(y, 0.0, 1.0).astype(np.float32)

    def to_fitted_lut(
        self,
        fit_type: CurveFitType = "normalize",
        params: NormalizeParams | None = None,
    ) -> np.ndarray:
        """Tone LUT reproducing the profile, smoothed by ``fit_type``.

        For "normalize" this is the inverse of the percentile remap.

        :raises ValueError: If fit_type is unknown
        """
        if fit_type == "raw":
            return self.to_lut()
        if fit_type == "simple":
            return self.to_simple_lut()
        if fit_type == "polynomial":
            return fitting.polynomial_fit(self.cdf)
        if fit_type == "spline":
            return fitting.spline_fit(self.control_points)
        if fit_type == "normalize":
            return invert_cdf(fitting.normalize_fit(self.cdf, params or DEFAULT_NORMALIZE_PARAMS))
        raise ValueError(f"Unknown fit type: {fit_type!r}. Expected one of {FIT_TYPES}")

    def to_fitted_inverse_lut(
        self,
        fit_type: CurveFitType = "normalize",
        params: NormalizeParams | None = None,
    ) -> np.ndarray:
        """Flattening LUT, smoothed by ``fit_type``.

        :raises ValueError: If fit_type is unknown
        """
        if fit_type == "raw":
            return self.to_inverse_lut()
        if fit_type == "simple":
            return self.to_simple_inverse_lut()
        if fit_type == "polynomial":
            return invert_cdf(fitting.polynomial_fit(self.cdf))
        if fit_type == "spline":
            return invert_cdf(fitting.spline_fit(self.control_points))
        if fit_type == "normalize":
            return fitting.normalize_fit(self.cdf, params or DEFAULT_NORMALIZE_PARAMS)
        raise ValueError(f"Unknown fit type: {fit_type!r}. Expected one of {FIT_TYPES}")


# =============================================================================
# Profile measurement helpers
# =============================================================================


def detect_black_white_points(histogram: np.ndarray, total: int, percentile: float) -> tuple[int, int]:
    """Find the first bin from each end where the count passes the threshold.

    Empty bins are skipped, so with ``percentile=0`` the points are the
    darkest and brightest occupied bins.
    """
    threshold = total * (percentile / 100.0)

    black = 0
    cumulative = 0
    for i in range(LUT_SIZE):
        count = int(histogram[i])
        if count > 0:
            cumulative += count
            if cumulative > threshold:
                black = i
                break

    white = LUT_SIZE - 1
    cumulative = 0
    for i in range(LUT_SIZE - 1, -1, -1):
        count = int(histogram[i])
        if count > 0:
            cumulative += count
            if cumulative > threshold:
                white = i
                break

    return black, white


def estimate_gamma(black_point: int, white_point: int, mean_luminance: float) -> float:
    """Gamma that maps 0.5 to the normalised mean: log(mean) / log(0.5)."""
    span = white_point - black_point
    if span <= 0:
        return 1.0
    normalized = (mean_luminance * 255.0 - black_point) / span
    normalized = min(0.99, max(0.01, normalized))
    gamma = math.log(normalized) / math.log(0.5)
    return min(5.0, max(0.2, gamma))


def sample_control_points(cdf: np.ndarray, count: int) -> tuple[ControlPoint, ...]:
    """Sample ``count`` evenly spaced CDF values with linear interpolation."""
    cdf = np.asarray(cdf, dtype=np.float64)
    points = []
    for i in range(count):
        x = i / (count - 1) if count > 1 else 0.0
        idx = x * (LUT_SIZE - 1)
        lo = int(math.floor(idx))
        hi = min(LUT_SIZE - 1, lo + 1)
        t = idx - lo
        points.append(ControlPoint(x, float(cdf[lo] * (1.0 - t) + cdf[hi] * t)))
    return tuple(points)


# =============================================================================
# LUT operations
# =============================================================================


def apply_lut(image: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Remap Oklab lightness through ``lut``, keeping a/b and alpha.

    Lightness is looked up at the nearest 8-bit bin.

    :param image: uint8 [H, W, 3|4] or [N, 3|4]
    :param lut: Lightness table [256] in [0, 1]
    :returns: New uint8 image of the same shape
    """
    pixels = as_pixels(image)
    lab = srgb_to_oklab(rgb_float(pixels))
    bins = quantize(lab[:, 0])
    lab[:, 0] = np.asarray(lut, dtype=np.float64)[bins]
    return with_rgb(pixels, quantize(oklab_to_srgb(lab)), np.shape(image))


def blend_lut(lut: np.ndarray, strength: float) -> np.ndarray:
    """Mix ``lut`` with the identity; strength is clamped to [0, 1]."""
    strength = min(1.0, max(0.0, strength))
    ident = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    return (ident * (1.0 - strength) + np.asarray(lut, dtype=np.float64) * strength).astype(np.float32)


def shift_lut_to_preserve_mean(
    lut: np.ndarray,
    original_mean: float,
    target_mean: float = 0.5,
) -> np.ndarray:
    """Offset a flattening LUT so its output mean returns to ``original_mean``.

    :param lut: Flattening table [256]
    :param original_mean: Mean lightness before flattening
    :param target_mean: Mean lightness the flattening tends toward
    """
    shift = original_mean - target_mean
    return np.clip(np.asarray(lut, dtype=np.float64) + shift, 0.0, 1.0).astype(np.float32)


def extract(image: np.ndarray, percentile: float = 1.0, num_control_points: int = 7) -> LuminanceProfile:
    return LuminanceProfile.extract(image, percentile, num_control_points)


def neutral() -> LuminanceProfile:
    return LuminanceProfile.neutral()
