"""Saturation normalisation.

Reduces visible over-saturation by pulling strongly saturated colours
toward their luminance. It never increases saturation, and ambiguous
scenes shrink the effect instead of disabling it.

Pipeline position: white balance -> saturation -> creative LUT.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np

from gradelut.correction.stats import LUMA_WEIGHTS, LuminanceStats, SaturationStats
from gradelut.lut.lut3d import DEFAULT_SIZE, Lut3D
from gradelut.tone.masks import smoothstep

logger = logging.getLogger(__name__)

SaturationGuard = Literal["none", "noCompression", "extremeKey", "highClipping", "lowMidRatio"]


@dataclass(frozen=True)
class SaturationParams:
    """Saturation correction parameters.

    Attributes:
        target_sat95: p95 chroma proxy considered acceptable
        sat_knee: Excess over the target at which compression is full
        sat_strength: Base strength (0-1)
        max_compression: Upper bound of the compression amount
        pixel_sat_lo: Chroma proxy where per-colour weighting starts
        pixel_sat_hi: Chroma proxy where per-colour weighting is full
        extreme_key_lo: Median below which the scene is treated as extreme
        extreme_key_hi: Median above which the scene is treated as extreme
        clip_threshold: Total clipping above which strength is reduced
        mid_ratio_threshold: Mid-tone share below which strength is reduced
    """

    target_sat95: float = 0.22
    sat_knee: float = 0.10
    sat_strength: float = 0.5
    max_compression: float = 0.35
    pixel_sat_lo: float = 0.10
    pixel_sat_hi: float = 0.30
    extreme_key_lo: float = 0.25
    extreme_key_hi: float = 0.75
    clip_threshold: float = 0.10
    mid_ratio_threshold: float = 0.20


DEFAULT_SATURATION_PARAMS = SaturationParams()


@dataclass(frozen=True)
class SaturationResult:
    """Computed saturation compression.

    Attributes:
        delta: Measured p95 proxy minus the target
        normalized_delta: Knee-shaped delta in [0, 1]
        compression_base: Blend toward grey for fully weighted colours
        effective_strength: Strength after guards
        guard_applied: Whether a guard fired
        guard_type: First guard that fired
        pixel_sat_lo: Weighting start, carried for LUT generation
        pixel_sat_hi: Weighting end, carried for LUT generation
    """

    delta: float
    normalized_delta: float
    compression_base: float
    effective_strength: float
    guard_applied: bool
    guard_type: SaturationGuard
    pixel_sat_lo: float
    pixel_sat_hi: float


def compute(
    saturation: SaturationStats,
    luminance: LuminanceStats,
    params: SaturationParams = DEFAULT_SATURATION_PARAMS,
) -> SaturationResult:
    """Compute the compression amount.

    Guards multiply the strength independently; ``guard_type`` records
    the first that fired.
    """
    strength = params.sat_strength
    delta = saturation.p95_proxy - params.target_sat95

    if delta <= 0:
        return SaturationResult(
            delta=delta,
            normalized_delta=0.0,
            compression_base=0.0,
            effective_strength=strength,
            guard_applied=True,
            guard_type="noCompression",
            pixel_sat_lo=params.pixel_sat_lo,
            pixel_sat_hi=params.pixel_sat_hi,
        )

    fired: list[SaturationGuard] = []
    if luminance.p50 < params.extreme_key_lo or luminance.p50 > params.extreme_key_hi:
        strength *= 0.7
        fired.append("extremeKey")
    if luminance.total_clip > params.clip_threshold:
        strength *= 0.7
        fired.append("highClipping")
    if luminance.mid_ratio < params.mid_ratio_threshold:
        strength *= 0.5
        fired.append("lowMidRatio")

    x = min(1.0, max(0.0, delta / params.sat_knee))
    normalized = float(smoothstep(0.0, 1.0, x))
    compression = min(normalized * strength, params.max_compression)

    logger.debug(
        "Saturation: delta=%.3f compression=%.4f guards=%s", delta, compression, fired
    )
    return SaturationResult(
        delta=delta,
        normalized_delta=normalized,
        compression_base=compression,
        effective_strength=strength,
        guard_applied=bool(fired),
        guard_type=fired[0] if fired else "none",
        pixel_sat_lo=params.pixel_sat_lo,
        pixel_sat_hi=params.pixel_sat_hi,
    )


def to_lut3d(result: SaturationResult, size: int = DEFAULT_SIZE) -> Lut3D:
    """3D LUT blending saturated colours toward Rec.709 grey.

    Each node moves by ``compression_base * smoothstep(lo, hi, max - min)``.
    A negligible compression returns the identity grid.
    """
    if result.compression_base <= 0.001:
        return Lut3D.identity(size)

    def compress(rgb: np.ndarray) -> np.ndarray:
        proxy = rgb.max(axis=-1, keepdims=True) - rgb.min(axis=-1, keepdims=True)
        weight = smoothstep(result.pixel_sat_lo, result.pixel_sat_hi, proxy)
        gray = rgb @ LUMA_WEIGHTS
        return rgb + (gray[:, None] - rgb) * (result.compression_base * weight)

    return Lut3D.identity(size).map_nodes(compress)


def create_lut_from_stats(
    saturation: SaturationStats,
    luminance: LuminanceStats,
    params: SaturationParams = DEFAULT_SATURATION_PARAMS,
    size: int = DEFAULT_SIZE,
) -> tuple[Lut3D, SaturationResult]:
    result = compute(saturation, luminance, params)
    return to_lut3d(result, size), result
