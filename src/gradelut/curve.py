"""Tone curves with monotone cubic interpolation.

A Curve is a short sequence of output values whose input positions are
implicit and evenly spaced over [0, 1]. Interpolation uses the
Fritsch-Carlson monotone cubic Hermite scheme (PCHIP), so monotone
control points always produce a monotone curve with no overshoot.

Example:
    >>> from gradelut.curve import Curve, to_lut
    >>> s_curve = Curve((0.0, 0.2, 0.5, 0.8, 1.0))
    >>> lut = to_lut(s_curve)  # float32 [256]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

LUT_SIZE = 256
FLAT_SEGMENT_EPSILON = 1e-10


@dataclass(frozen=True)
class Curve:
    """Control points of a tone curve.

    Attributes:
        points: Output values (each in [0, 1]) at inputs i/(n-1)
    """

    points: tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(float(p) for p in self.points))

    @classmethod
    def identity(cls, point_count: int = 7) -> Curve:
        """Create a straight-line curve with evenly spaced points.

        :param point_count: Number of control points (at least 2)
        :returns: Identity curve
        """
        point_count = max(2, point_count)
        return cls(tuple(i / (point_count - 1) for i in range(point_count)))

    @classmethod
    def from_points(cls, points: Sequence[float]) -> Curve:
        return cls(tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    def is_identity(self, tolerance: float = 1e-3) -> bool:
        """Check whether every point lies on the diagonal."""
        n = len(self.points)
        if n < 2:
            return False
        return all(abs(p - i / (n - 1)) < tolerance for i, p in enumerate(self.points))


def compute_tangents(points: Sequence[float]) -> np.ndarray:
    """Fritsch-Carlson tangents for evenly spaced control points.

    :param points: Control point outputs, at least 2
    :returns: Tangent (dy/dx) at every control point
    """
    ys = np.asarray(points, dtype=np.float64)
    n = len(ys)
    h = 1.0 / (n - 1)
    delta = np.diff(ys) / h

    m = np.empty(n, dtype=np.float64)
    m[0] = delta[0]
    m[-1] = delta[-1]
    for i in range(1, n - 1):
        d0, d1 = delta[i - 1], delta[i]
        if d0 * d1 <= 0:
            # Local extremum
            m[i] = 0.0
        else:
            m[i] = 2.0 * d0 * d1 / (d0 + d1)

    for i in range(n - 1):
        if abs(delta[i]) < FLAT_SEGMENT_EPSILON:
            m[i] = 0.0
            m[i + 1] = 0.0
            continue
        alpha = m[i] / delta[i]
        beta = m[i + 1] / delta[i]
        norm = alpha * alpha + beta * beta
        if norm > 9.0:
            tau = 3.0 / np.sqrt(norm)
            m[i] = tau * alpha * delta[i]
            m[i + 1] = tau * beta * delta[i]

    return m


def get_interpolator(curve: Curve) -> Callable[[float | np.ndarray], float | np.ndarray]:
    """Build the interpolating function of a curve.

    Inputs outside [0, 1] evaluate to the nearest endpoint value. A curve
    with a single point is constant; an empty curve is the identity.

    :param curve: Curve to interpolate
    :returns: Function mapping x (scalar or array) to y
    """
    ys = np.asarray(curve.points, dtype=np.float64)
    n = len(ys)

    if n == 0:
        logger.debug("Empty curve, using identity")
        return lambda x: np.clip(x, 0.0, 1.0)
    if n == 1:
        value = float(ys[0])

        def constant(x):
            if np.ndim(x) == 0:
                return value
            return np.full(np.shape(x), value, dtype=np.float64)

        return constant

    m = compute_tangents(ys)
    h = 1.0 / (n - 1)

    def interpolate(x):
        scalar = np.ndim(x) == 0
        xs = np.clip(np.asarray(x, dtype=np.float64), 0.0, 1.0)
        pos = xs * (n - 1)
        seg = np.minimum(np.floor(pos).astype(np.int64), n - 2)
        t = pos - seg

        t2 = t * t
        t3 = t2 * t
        h00 = 2 * t3 - 3 * t2 + 1
        h10 = t3 - 2 * t2 + t
        h01 = -2 * t3 + 3 * t2
        h11 = t3 - t2

        y = h00 * ys[seg] + h10 * h * m[seg] + h01 * ys[seg + 1] + h11 * h * m[seg + 1]
        return float(y) if scalar else y

    return interpolate


def to_lut(curve: Curve) -> np.ndarray:
    """Sample a curve into a 256-entry float LUT.

    :param curve: Curve to sample
    :returns: float32 [256] with values in [0, 1]
    """
    x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
    y = np.broadcast_to(get_interpolator(curve)(x), x.shape)
    return np.clip(y, 0.0, 1.0).astype(np.float32)


def to_lut_uint8(curve: Curve) -> np.ndarray:
    """Sample a curve into a quantized 8-bit LUT.

    :param curve: Curve to sample
    :returns: uint8 [256]
    """
    return np.floor(to_lut(curve).astype(np.float64) * 255.0 + 0.5).astype(np.uint8)
