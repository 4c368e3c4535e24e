"""Colour space conversions used by the tone and LUT modules."""

from gradelut.color.hsl import hsl_to_rgb, hue_difference, rgb_to_hsl
from gradelut.color.oklab import (
    linear_to_srgb,
    oklab_lightness,
    oklab_to_srgb,
    srgb_to_linear,
    srgb_to_oklab,
)

__all__ = [
    # Transfer functions
    "srgb_to_linear",
    "linear_to_srgb",
    # Oklab
    "srgb_to_oklab",
    "oklab_to_srgb",
    "oklab_lightness",
    # HSL
    "rgb_to_hsl",
    "hsl_to_rgb",
    "hue_difference",
]
