"""Oklab luminance profiles and the tone curves derived from them."""

from gradelut.luminance.fitting import (
    ControlPoint,
    NormalizeParams,
    invert_cdf,
    normalize_fit,
    polynomial_fit,
    soft_clip,
    spline_fit,
)
from gradelut.luminance.profile import (
    FIT_TYPES,
    CurveFitType,
    LuminanceProfile,
    apply_lut,
    blend_lut,
    extract,
    neutral,
    shift_lut_to_preserve_mean,
)
from gradelut.luminance.tone_profile import ChannelTone, ToneProfile, create_transfer_lut

__all__ = [
    # Profile
    "LuminanceProfile",
    "ControlPoint",
    "extract",
    "neutral",
    # LUT operations
    "apply_lut",
    "blend_lut",
    "shift_lut_to_preserve_mean",
    # Per-channel tone
    "ChannelTone",
    "ToneProfile",
    "create_transfer_lut",
    # Fitting
    "CurveFitType",
    "FIT_TYPES",
    "NormalizeParams",
    "invert_cdf",
    "normalize_fit",
    "polynomial_fit",
    "soft_clip",
    "spline_fit",
]
