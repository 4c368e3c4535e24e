"""Curve fitting over 256-entry luminance tables.

All functions take and return float32 tables [256] with values in [0, 1].
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

LUT_SIZE = 256
POLYNOMIAL_DEGREE = 5
POLYNOMIAL_SAMPLES = 64
PIVOT_EPSILON = 1e-10
SOFT_CLIP_LOW = 0.05
SOFT_CLIP_HIGH = 0.95
SOFT_CLIP_WIDTH = 0.05


@dataclass(frozen=True)
class ControlPoint:
    """A sampled (input, output) pair of a tone curve, both in [0, 1]."""

    input: float
    output: float


@dataclass(frozen=True)
class NormalizeParams:
    """Percentile-window remap parameters.

    Attributes:
        input_low_percentile: Percentile (0-100) mapped to ``output_low``
        input_high_percentile: Percentile (0-100) mapped to ``output_high``
        output_low: Output value of the low percentile
        output_high: Output value of the high percentile
        target_gamma: Optional gamma applied inside the window
    """

    input_low_percentile: float = 1.0
    input_high_percentile: float = 99.0
    output_low: float = 0.0
    output_high: float = 1.0
    target_gamma: float | None = None


DEFAULT_NORMALIZE_PARAMS = NormalizeParams()


def linear_lut() -> np.ndarray:
    return (np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)).astype(np.float32)


def invert_cdf(cdf: np.ndarray) -> np.ndarray:
    """Invert a non-decreasing table.

    For each target i/255 finds the first entry reaching it and refines
    linearly against the previous entry. Targets never reached map to 1.

    :param cdf: Non-decreasing table [256]
    :returns: Inverse table [256]
    """
    cdf = np.asarray(cdf, dtype=np.float64)
    targets = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    inverse = np.empty(LUT_SIZE, dtype=np.float64)

    for i, target in enumerate(targets):
        hits = np.nonzero(cdf >= target)[0]
        found = int(hits[0]) if hits.size else LUT_SIZE - 1

        if 0 < found < LUT_SIZE - 1 and cdf[found] > cdf[found - 1]:
            prev_val = cdf[found - 1]
            t = (target - prev_val) / (cdf[found] - prev_val)
            inverse[i] = (found - 1 + t) / (LUT_SIZE - 1)
        else:
            inverse[i] = found / (LUT_SIZE - 1)

    return inverse.astype(np.float32)


def solve_linear_system(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve ``a @ x = b`` by Gaussian elimination with partial pivoting.

    Near-zero pivots (below PIVOT_EPSILON) are skipped and the matching
    unknown is set to 0, so singular systems degrade instead of failing.

    :param a: Square matrix [m, m]
    :param b: Right-hand side [m]
    :returns: Solution [m]
    """
    n = b.shape[0]
    aug = np.hstack([np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)[:, None]])

    for i in range(n):
        pivot_row = i + int(np.argmax(np.abs(aug[i:, i])))
        if pivot_row != i:
            aug[[i, pivot_row]] = aug[[pivot_row, i]]
        if abs(aug[i, i]) < PIVOT_EPSILON:
            logger.debug("Skipping near-zero pivot at column %d", i)
            continue
        factors = aug[i + 1 :, i] / aug[i, i]
        aug[i + 1 :, i:] -= factors[:, None] * aug[i, i:]

    x = np.zeros(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        if abs(aug[i, i]) < PIVOT_EPSILON:
            continue
        x[i] = (aug[i, n] - aug[i, i + 1 : n] @ x[i + 1 :]) / aug[i, i]
    return x


def fit_polynomial(xs: np.ndarray, ys: np.ndarray, degree: int) -> np.ndarray:
    """Least-squares polynomial coefficients, lowest order first.

    Solves the normal equations ``(X^T X) a = X^T y`` for the Vandermonde
    matrix X.
    """
    vander = np.vander(np.asarray(xs, dtype=np.float64), degree + 1, increasing=True)
    return solve_linear_system(vander.T @ vander, vander.T @ np.asarray(ys, dtype=np.float64))


def polynomial_fit(cdf: np.ndarray, degree: int = POLYNOMIAL_DEGREE) -> np.ndarray:
    """Smooth a table with a least-squares polynomial.

    The fit uses POLYNOMIAL_SAMPLES evenly spaced entries.
    """
    cdf = np.asarray(cdf, dtype=np.float64)
    step = LUT_SIZE / POLYNOMIAL_SAMPLES
    idx = np.floor(np.arange(POLYNOMIAL_SAMPLES) * step + 0.5).astype(np.int64)
    xs = idx / (LUT_SIZE - 1)
    ys = cdf[np.minimum(LUT_SIZE - 1, idx)]

    coeffs = fit_polynomial(xs, ys, degree)
    x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    y = np.polynomial.polynomial.polyval(x, coeffs)
    return np.clip(y, 0.0, 1.0).astype(np.float32)


def catmull_rom(points: Sequence[ControlPoint], x: float) -> float:
    """Evaluate a Catmull-Rom spline through ``points`` at ``x``.

    End points are duplicated for the outer tangents. Inputs past the
    last segment extrapolate along it; the result is clamped to [0, 1].
    """
    n = len(points)
    seg = n - 2
    for i in range(n - 1):
        if points[i].input <= x <= points[i + 1].input:
            seg = i
            break

    p0 = points[max(0, seg - 1)].output
    p1 = points[seg]
    p2 = points[min(n - 1, seg + 1)]
    p3 = points[min(n - 1, seg + 2)].output

    length = p2.input - p1.input
    t = (x - p1.input) / length if length > 0 else 0.0
    t2 = t * t
    t3 = t2 * t
    y = 0.5 * (
        2.0 * p1.output
        + (-p0 + p2.output) * t
        + (2.0 * p0 - 5.0 * p1.output + 4.0 * p2.output - p3) * t2
        + (-p0 + 3.0 * p1.output - 3.0 * p2.output + p3) * t3
    )
    return min(1.0, max(0.0, y))


def spline_fit(points: Sequence[ControlPoint]) -> np.ndarray:
    """Table from a Catmull-Rom spline through control points.

    Fewer than two points give the linear table.
    """
    if len(points) < 2:
        return linear_lut()
    lut = [catmull_rom(points, i / (LUT_SIZE - 1)) for i in range(LUT_SIZE)]
    return np.asarray(lut, dtype=np.float32)


def cdf_percentile(cdf: np.ndarray, percentile: float) -> float:
    """Input level (0-1) at which the CDF first reaches ``percentile`` %."""
    target = percentile / 100.0
    hits = np.nonzero(np.asarray(cdf, dtype=np.float64) >= target)[0]
    return float(hits[0]) / (LUT_SIZE - 1) if hits.size else 1.0


def soft_clip(values: np.ndarray) -> np.ndarray:
    """Compress values outside [SOFT_CLIP_LOW, SOFT_CLIP_HIGH] with tanh.

    Values inside the band are unchanged; values outside approach the
    band edge +/- SOFT_CLIP_WIDTH asymptotically.
    """
    y = np.asarray(values, dtype=np.float64)
    w = SOFT_CLIP_WIDTH
    low = SOFT_CLIP_LOW - w * np.tanh((SOFT_CLIP_LOW - y) / w)
    high = SOFT_CLIP_HIGH + w * np.tanh((y - SOFT_CLIP_HIGH) / w)
    return np.where(y < SOFT_CLIP_LOW, low, np.where(y > SOFT_CLIP_HIGH, high, y))


def normalize_fit(cdf: np.ndarray, params: NormalizeParams = DEFAULT_NORMALIZE_PARAMS) -> np.ndarray:
    """Percentile-window remap.

    Linearly maps the input levels at the low/high percentiles of ``cdf``
    to ``[output_low, output_high]``, applies the optional target gamma
    inside the window and soft-clips the extremes.

    :param cdf: Luminance CDF [256]
    :param params: Window and output parameters
    :returns: Remap table [256]
    """
    lo = cdf_percentile(cdf, params.input_low_percentile)
    hi = cdf_percentile(cdf, params.input_high_percentile)
    if hi - lo <= 1e-6:
        logger.debug("Normalize window is empty (lo=%.4f, hi=%.4f), using linear table", lo, hi)
        return linear_lut()

    x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    t = (x - lo) / (hi - lo)
    if params.target_gamma is not None:
        inside = (t > 0.0) & (t < 1.0)
        t = np.where(inside, np.power(np.clip(t, 0.0, 1.0), params.target_gamma), t)

    y = params.output_low + t * (params.output_high - params.output_low)
    return np.clip(soft_clip(y), 0.0, 1.0).astype(np.float32)
