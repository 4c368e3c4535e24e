"""Vectorised RGB <-> HSL conversion (hue in degrees)."""

from __future__ import annotations

import numpy as np


def rgb_to_hsl(rgb: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Convert RGB colours to HSL.

    :param rgb: Colours [..., 3] in [0, 1]
    :returns: Tuple of (hue in [0, 360), saturation, lightness)
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    mx = rgb.max(axis=-1)
    mn = rgb.min(axis=-1)
    lightness = (mx + mn) / 2
    d = mx - mn
    chromatic = d > 0
    d_safe = np.where(chromatic, d, 1.0)

    denom = np.where(lightness > 0.5, 2.0 - mx - mn, mx + mn)
    saturation = np.where(chromatic, d / np.where(denom > 0, denom, 1.0), 0.0)

    hue = np.select(
        [~chromatic, mx == r, mx == g],
        [
            0.0,
            ((g - b) / d_safe + np.where(g < b, 6.0, 0.0)) / 6,
            ((b - r) / d_safe + 2.0) / 6,
        ],
        default=((r - g) / d_safe + 4.0) / 6,
    )
    return hue * 360.0, saturation, lightness


def _hue_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.mod(t, 1.0)
    return np.select(
        [t < 1 / 6, t < 1 / 2, t < 2 / 3],
        [p + (q - p) * 6 * t, q, p + (q - p) * (2 / 3 - t) * 6],
        default=p,
    )


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """Convert HSL to RGB.

    :param hue: Hue in degrees
    :param saturation: Saturation in [0, 1]
    :param lightness: Lightness in [0, 1]
    :returns: Colours [..., 3] in [0, 1]
    """
    h = np.asarray(hue, dtype=np.float64) / 360.0
    s = np.asarray(saturation, dtype=np.float64)
    lightness = np.asarray(lightness, dtype=np.float64)

    q = np.where(lightness < 0.5, lightness * (1 + s), lightness + s - lightness * s)
    p = 2 * lightness - q

    rgb = np.stack(
        [
            _hue_channel(p, q, h + 1 / 3),
            _hue_channel(p, q, h),
            _hue_channel(p, q, h - 1 / 3),
        ],
        axis=-1,
    )
    gray = np.stack([lightness, lightness, lightness], axis=-1)
    return np.where((s == 0)[..., None], gray, rgb)


def hue_difference(a, b):
    """Absolute angular distance between two hues in degrees, in [0, 180]."""
    return np.abs(np.mod(np.asarray(a) - b + 540.0, 360.0) - 180.0)
