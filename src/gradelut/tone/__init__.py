"""Parametric tone adjustment."""

from gradelut.tone.adjustment import (
    STAGE_NAMES,
    STAGES,
    Adjustment,
    Stage,
    brightness_to_gamma,
    evaluate,
    is_identity,
    to_lut,
    to_lut3d,
    to_lut_float,
    to_lut_float_rgb,
)

__all__ = [
    "Adjustment",
    "Stage",
    "STAGES",
    "STAGE_NAMES",
    "brightness_to_gamma",
    "evaluate",
    "is_identity",
    "to_lut",
    "to_lut3d",
    "to_lut_float",
    "to_lut_float_rgb",
]
