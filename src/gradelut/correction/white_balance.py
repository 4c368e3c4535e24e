"""Colour-cast normalisation.

This does not try to find the correct colour temperature. It weakens a
global cast so later creative LUTs behave predictably, working with
channel ratios relative to green. Intentional colour (sunsets, neon) is
protected by guards that shrink the correction, and the correction always
falls back toward doing nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from gradelut.correction.stats import HIST_SIZE, LuminanceStats, NeutralStats
from gradelut.lut.lut1d import Lut1D

logger = logging.getLogger(__name__)

WbGuard = Literal["noNeutral", "lowNeutralRatio", "lowMidRatio", "extremeKey", "highClipping"]

RATIO_EPSILON = 0.001


@dataclass(frozen=True)
class WhiteBalanceParams:
    strength: float = 0.4
    gain_min: float = 0.90
    gain_max: float = 1.10
    neutral_ratio_min: float = 0.02
    mid_ratio_min: float = 0.20


DEFAULT_WHITE_BALANCE_PARAMS = WhiteBalanceParams()


@dataclass(frozen=True)
class WhiteBalanceResult:
    """Computed white balance gains.

    Attributes:
        raw_kr: Green/red ratio of the neutral median
        raw_kb: Green/blue ratio of the neutral median
        clamped_kr: raw_kr limited to [gain_min, gain_max]
        clamped_kb: raw_kb limited to [gain_min, gain_max]
        gain_r: Final red gain after strength blending
        gain_g: Green gain (always 1)
        gain_b: Final blue gain after strength blending
        effective_strength: Strength after guards
        guard_applied: Whether any guard fired
        guards: Every guard that fired, in evaluation order
    """

    raw_kr: float = 1.0
    raw_kb: float = 1.0
    clamped_kr: float = 1.0
    clamped_kb: float = 1.0
    gain_r: float = 1.0
    gain_g: float = 1.0
    gain_b: float = 1.0
    effective_strength: float = 0.0
    guard_applied: bool = False
    guards: tuple[WbGuard, ...] = field(default_factory=tuple)


def compute(
    neutral: NeutralStats,
    luminance: LuminanceStats,
    params: WhiteBalanceParams = DEFAULT_WHITE_BALANCE_PARAMS,
) -> WhiteBalanceResult:
    """Compute white balance gains from neutral candidates.

    Guards multiply the strength and accumulate.
    """
    if neutral.confidence == "none" or neutral.count == 0:
        logger.debug("White balance guard noNeutral")
        return WhiteBalanceResult(guard_applied=True, guards=("noNeutral",))

    strength = params.strength
    guards: list[WbGuard] = []
    if neutral.ratio < params.neutral_ratio_min:
        strength *= 0.2
        guards.append("lowNeutralRatio")
    if luminance.mid_ratio < params.mid_ratio_min:
        strength *= 0.3
        guards.append("lowMidRatio")
    if luminance.p50 < 0.25 or luminance.p50 > 0.75:
        strength *= 0.5
        guards.append("extremeKey")
    if luminance.total_clip > 0.10:
        strength *= 0.5
        guards.append("highClipping")

    med_r, med_g, med_b = neutral.median_rgb
    raw_kr = med_g / max(RATIO_EPSILON, med_r)
    raw_kb = med_g / max(RATIO_EPSILON, med_b)
    clamped_kr = min(params.gain_max, max(params.gain_min, raw_kr))
    clamped_kb = min(params.gain_max, max(params.gain_min, raw_kb))
    gain_r = 1.0 + (clamped_kr - 1.0) * strength
    gain_b = 1.0 + (clamped_kb - 1.0) * strength

    logger.debug("White balance: gain_r=%.4f gain_b=%.4f guards=%s", gain_r, gain_b, guards)
    return WhiteBalanceResult(
        raw_kr=raw_kr,
        raw_kb=raw_kb,
        clamped_kr=clamped_kr,
        clamped_kb=clamped_kb,
        gain_r=gain_r,
        gain_g=1.0,
        gain_b=gain_b,
        effective_strength=strength,
        guard_applied=bool(guards),
        guards=tuple(guards),
    )


def to_lut(result: WhiteBalanceResult) -> Lut1D:
    """Per-channel gain LUT."""
    x = np.arange(HIST_SIZE, dtype=np.float64) / (HIST_SIZE - 1)
    return Lut1D(
        r=np.clip(x * result.gain_r, 0.0, 1.0),
        g=np.clip(x * result.gain_g, 0.0, 1.0),
        b=np.clip(x * result.gain_b, 0.0, 1.0),
    )


def create_lut_from_stats(
    neutral: NeutralStats,
    luminance: LuminanceStats,
    params: WhiteBalanceParams = DEFAULT_WHITE_BALANCE_PARAMS,
) -> tuple[Lut1D, WhiteBalanceResult]:
    result = compute(neutral, luminance, params)
    return to_lut(result), result
