"""Automatic contrast correction.

Moves the p10-p90 luminance range toward a target range with a gentle
sine-shaped S-curve. High-contrast images are never expanded further.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

from gradelut.correction.stats import LuminanceStats
from gradelut.curve import Curve, to_lut as curve_to_lut
from gradelut.lut.lut1d import Lut1D

logger = logging.getLogger(__name__)

ContrastGuard = Literal["none", "highContrast", "lowKeyLowContrast", "highKey", "lowMidRatio"]


@dataclass(frozen=True)
class ContrastParams:
    """Contrast correction parameters.

    Attributes:
        target_range: Target p90 - p10 range
        max_range: Limit of the tanh-softened range change
        strength: Blend factor (0-1)
        high_contrast_threshold: Range above which expansion is refused
        mid_ratio_threshold: Mid-tone share below which strength is reduced
    """

    target_range: float = 0.55
    max_range: float = 0.15
    strength: float = 0.4
    high_contrast_threshold: float = 0.75
    mid_ratio_threshold: float = 0.2


DEFAULT_CONTRAST_PARAMS = ContrastParams()


@dataclass(frozen=True)
class ContrastResult:
    """Computed contrast correction.

    Attributes:
        delta: target_range - measured range
        clamped_delta: delta after tanh limiting
        amount: Final S-curve amount (positive adds contrast)
        effective_strength: Strength after guards
        guard_applied: Whether a guard changed the result
        guard_type: Which guard fired
    """

    delta: float
    clamped_delta: float
    amount: float
    effective_strength: float
    guard_applied: bool = False
    guard_type: ContrastGuard = "none"


def compute(stats: LuminanceStats, params: ContrastParams = DEFAULT_CONTRAST_PARAMS) -> ContrastResult:
    """Compute the contrast correction amount.

    At most one strength guard applies; they are checked in order
    low-key/low-contrast, high-key, low mid-tone ratio.
    """
    strength = params.strength
    delta = params.target_range - stats.range

    if stats.range > params.high_contrast_threshold and delta > 0:
        logger.debug("Contrast guard highContrast: range=%.3f", stats.range)
        return ContrastResult(delta, 0.0, 0.0, strength, True, "highContrast")

    guard: ContrastGuard = "none"
    if stats.p50 < 0.3 and stats.range < 0.3:
        strength *= 0.3
        guard = "lowKeyLowContrast"
    elif stats.p50 > 0.7:
        strength *= 0.5
        guard = "highKey"
    elif stats.mid_ratio < params.mid_ratio_threshold:
        strength *= 0.3
        guard = "lowMidRatio"

    clamped = params.max_range * math.tanh(delta / params.max_range)
    amount = clamped * strength
    logger.debug("Contrast: delta=%.3f amount=%.4f guard=%s", delta, amount, guard)
    return ContrastResult(delta, clamped, amount, strength, guard != "none", guard)


def to_curve(result: ContrastResult, point_count: int = 7) -> Curve:
    """S-curve for the correction, with fixed endpoints.

    Interior points move by ``sin((x - 0.5) * pi) * amount``.
    """
    if abs(result.amount) < 0.001:
        return Curve.identity(point_count)

    n = point_count - 1
    points = []
    for i in range(point_count):
        x = i / n
        if i == 0:
            points.append(0.0)
        elif i == n:
            points.append(1.0)
        else:
            shift = math.sin((x - 0.5) * 2.0 * math.pi / 2.0) * result.amount
            points.append(min(1.0, max(0.0, x + shift)))
    return Curve(tuple(points))


def to_lut(result: ContrastResult, point_count: int = 7) -> Lut1D:
    return Lut1D.from_master(curve_to_lut(to_curve(result, point_count)))


def create_lut_from_stats(
    stats: LuminanceStats,
    params: ContrastParams = DEFAULT_CONTRAST_PARAMS,
) -> tuple[Lut1D, ContrastResult]:
    result = compute(stats, params)
    return to_lut(result), result

