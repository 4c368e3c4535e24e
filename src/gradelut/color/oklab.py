"""sRGB, linear light and Oklab conversions.

All functions operate on numpy arrays (or scalars) with values in [0, 1]
and are vectorised over any leading shape. Colour arrays use a trailing
axis of size 3.
"""

from __future__ import annotations

import numpy as np

# =============================================================================
# Constants
# =============================================================================

SRGB_THRESHOLD = 0.04045
LINEAR_THRESHOLD = 0.0031308
SRGB_GAMMA = 2.4

# Linear sRGB -> LMS
_RGB_TO_LMS = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ],
    dtype=np.float64,
)

# Cube-rooted LMS -> Lab
_LMS_TO_LAB = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ],
    dtype=np.float64,
)

# Lab -> cube-rooted LMS
_LAB_TO_LMS = np.array(
    [
        [1.0, 0.3963377774, 0.2158037573],
        [1.0, -0.1055613458, -0.0638541728],
        [1.0, -0.0894841775, -1.2914855480],
    ],
    dtype=np.float64,
)

# LMS -> linear sRGB
_LMS_TO_RGB = np.array(
    [
        [4.0767416621, -3.3077115913, 0.2309699292],
        [-1.2684380046, 2.6097574011, -0.3413193965],
        [-0.0041960863, -0.7034186147, 1.7076147010],
    ],
    dtype=np.float64,
)


# =============================================================================
# Transfer functions
# =============================================================================


def srgb_to_linear(c):
    """Expand sRGB-encoded values to linear light.

    :param c: sRGB value(s) in [0, 1]
    :returns: Linear value(s)
    """
    c = np.asarray(c, dtype=np.float64)
    return np.where(
        c <= SRGB_THRESHOLD,
        c / 12.92,
        np.power((np.maximum(c, 0.0) + 0.055) / 1.055, SRGB_GAMMA),
    )


def linear_to_srgb(c):
    """Compress linear light to sRGB encoding, clamped to [0, 1].

    :param c: Linear value(s)
    :returns: sRGB value(s) in [0, 1]
    """
    c = np.asarray(c, dtype=np.float64)
    encoded = np.where(
        c <= LINEAR_THRESHOLD,
        c * 12.92,
        1.055 * np.power(np.maximum(c, 0.0), 1.0 / SRGB_GAMMA) - 0.055,
    )
    return np.clip(encoded, 0.0, 1.0)


# =============================================================================
# Oklab
# =============================================================================


def srgb_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """Convert sRGB colours to Oklab.

    :param rgb: sRGB colours [..., 3] in [0, 1]
    :returns: Oklab colours [..., 3] as (L, a, b)
    """
    linear = srgb_to_linear(rgb)
    lms = linear @ _RGB_TO_LMS.T
    return np.cbrt(lms) @ _LMS_TO_LAB.T


def oklab_to_srgb(lab: np.ndarray) -> np.ndarray:
    """Convert Oklab colours back to sRGB, clamped to [0, 1].

    :param lab: Oklab colours [..., 3]
    :returns: sRGB colours [..., 3] in [0, 1]
    """
    lms_ = np.asarray(lab, dtype=np.float64) @ _LAB_TO_LMS.T
    linear = (lms_**3) @ _LMS_TO_RGB.T
    return linear_to_srgb(linear)


def oklab_lightness(rgb: np.ndarray) -> np.ndarray:
    """Perceptual lightness (Oklab L) of sRGB colours.

    :param rgb: sRGB colours [..., 3] in [0, 1]
    :returns: Lightness [...]
    """
    return srgb_to_oklab(rgb)[..., 0]
