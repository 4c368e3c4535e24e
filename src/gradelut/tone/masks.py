"""Tonal range masks.

All masks take values in [0, 1] (scalar or array) and return weights in
[0, 1].
"""

from __future__ import annotations

import numpy as np


def smoothstep(edge0: float, edge1: float, x):
    """Hermite step 3t^2 - 2t^3 of x normalised to [edge0, edge1]."""
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def highlight_mask(x):
    """0 below 0.25, 1 above 0.75."""
    return smoothstep(0.25, 0.75, x)


def shadow_mask(x):
    """Complement of highlight_mask."""
    return 1.0 - highlight_mask(x)


def white_mask(x):
    """Top quarter of the range: 0 up to 0.75, 1 at 1."""
    return smoothstep(0.75, 1.0, x)


def black_mask(x):
    """Bottom quarter of the range: 1 at 0, 0 from 0.25."""
    return 1.0 - smoothstep(0.0, 0.25, x)


def clarity_mask(x):
    """Midtone bell: 0 at both ends, 1 at 0.5."""
    x = np.clip(np.asarray(x, dtype=np.float64), 0.0, 1.0)
    return 4.0 * x * (1.0 - x)
