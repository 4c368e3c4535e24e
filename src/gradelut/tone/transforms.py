"""Analytic transfer functions for individual tone stages.

Each function maps values in [0, 1] (scalar or numpy array) to values in
[0, 1]. Parameters whose magnitude is below SKIP_EPSILON leave the input
unchanged.
"""

from __future__ import annotations

import numpy as np

from gradelut.color.oklab import linear_to_srgb, srgb_to_linear
from gradelut.tone.masks import black_mask, clarity_mask, highlight_mask, smoothstep, white_mask

SKIP_EPSILON = 1e-3

HIGHLIGHT_SHADOW_STRENGTH = 0.5
WHITE_BLACK_STRENGTH = 0.3
CONTRAST_SLOPE = 4.0
CLARITY_STRENGTH = 0.4
FADE_STRENGTH = 0.2
TOE_END = 0.3
SHOULDER_START = 0.7
FILMIC_STRENGTH = 1.5
TEMPERATURE_GAIN = 0.2
TINT_GAIN = 0.2
SPLIT_TONE_STRENGTH = 0.5


def _clamp(x):
    return np.clip(x, 0.0, 1.0)


def brightness_to_gamma(brightness: float) -> float:
    """Map brightness in [-1, 1] to a gamma exponent 2^-brightness."""
    return float(2.0 ** (-brightness))


def apply_gamma(x, gamma: float):
    """Raise clamped input to ``gamma``; 0 and 1 are fixed points."""
    return np.power(_clamp(np.asarray(x, dtype=np.float64)), gamma)


def apply_exposure(x, ev: float):
    """Scale by 2^ev in linear light."""
    x = np.asarray(x, dtype=np.float64)
    if abs(ev) < SKIP_EPSILON:
        return x
    return linear_to_srgb(_clamp(srgb_to_linear(_clamp(x)) * 2.0**ev))


def apply_highlights_shadows(x, highlights: float, shadows: float):
    """Offset the upper and lower halves of the range, blended by highlight_mask.

    The curve is monotone while ``highlights - shadows >= -2/3``. Below that
    the offset falls faster than the input rises across the mask's
    transition, so values near 0.6 land below values near 0.4.
    """
    x = np.asarray(x, dtype=np.float64)
    if abs(highlights) < SKIP_EPSILON and abs(shadows) < SKIP_EPSILON:
        return x
    hm = highlight_mask(x)
    offset = (highlights * hm + shadows * (1.0 - hm)) * HIGHLIGHT_SHADOW_STRENGTH
    return _clamp(x + offset)


def apply_whites_blacks(x, whites: float, blacks: float):
    x = np.asarray(x, dtype=np.float64)
    if abs(whites) < SKIP_EPSILON and abs(blacks) < SKIP_EPSILON:
        return x
    offset = (whites * white_mask(x) + blacks * black_mask(x)) * WHITE_BLACK_STRENGTH
    return _clamp(x + offset)


def apply_brightness(x, brightness: float):
    x = np.asarray(x, dtype=np.float64)
    if abs(brightness) < SKIP_EPSILON:
        return x
    return apply_gamma(x, brightness_to_gamma(brightness))


def apply_contrast(x, contrast: float):
    """Sigmoid contrast.

    Positive values apply a logistic S-curve renormalised so 0 and 1 stay
    fixed. Negative values pull every value linearly toward 0.5, reaching
    a flat 0.5 at -1.
    """
    x = np.asarray(x, dtype=np.float64)
    if abs(contrast) < SKIP_EPSILON:
        return x
    if contrast < 0:
        return _clamp(0.5 + (x - 0.5) * (1.0 - min(1.0, -contrast)))

    k = contrast * CONTRAST_SLOPE * 4.0

    def sigmoid(v):
        return 1.0 / (1.0 + np.exp(-k * (v - 0.5)))

    s0 = sigmoid(0.0)
    s1 = sigmoid(1.0)
    return _clamp((sigmoid(x) - s0) / (s1 - s0))


def apply_toe(x, toe: float):
    """Filmic toe: power curve below TOE_END, continuous at the joint."""
    x = np.asarray(x, dtype=np.float64)
    if toe < SKIP_EPSILON:
        return x
    t = _clamp(x / TOE_END)
    return np.where(x < TOE_END, np.power(t, 1.0 + toe * FILMIC_STRENGTH) * TOE_END, x)


def apply_shoulder(x, shoulder: float):
    """Filmic shoulder: highlight roll-off above SHOULDER_START."""
    x = np.asarray(x, dtype=np.float64)
    if shoulder < SKIP_EPSILON:
        return x
    span = 1.0 - SHOULDER_START
    t = _clamp((x - SHOULDER_START) / span)
    rolled = SHOULDER_START + np.power(t, 1.0 / (1.0 + shoulder * FILMIC_STRENGTH)) * span
    return np.where(x > SHOULDER_START, _clamp(rolled), x)


def temperature_tint_gains(temperature: float, tint: float) -> tuple[float, float, float]:
    """Per-channel multipliers for white balance shifts.

    Warm temperature raises R and lowers B; positive tint lowers G
    (magenta) and slightly raises R and B.

    :returns: Tuple of (r, g, b) gains
    """
    r = 1.0 + temperature * TEMPERATURE_GAIN + tint * TINT_GAIN * 0.5
    g = 1.0 - tint * TINT_GAIN
    b = 1.0 - temperature * TEMPERATURE_GAIN + tint * TINT_GAIN * 0.5
    return r, g, b


def apply_temperature_tint(x, temperature: float, tint: float, channel: int):
    x = np.asarray(x, dtype=np.float64)
    if abs(temperature) < SKIP_EPSILON and abs(tint) < SKIP_EPSILON:
        return x
    return _clamp(x * temperature_tint_gains(temperature, tint)[channel])


def hue_to_rgb_offset(hue_deg: float) -> tuple[float, float, float]:
    """Convert hue angle to a zero-centred RGB offset.

    :param hue_deg: Hue angle in degrees
    :returns: Tuple of (r, g, b) offsets in [-0.5, 0.5]
    """
    hue_rad = hue_deg * (np.pi / 180.0)
    r = np.cos(hue_rad) * 0.5
    g = np.cos(hue_rad - 2.0 * np.pi / 3.0) * 0.5
    b = np.cos(hue_rad - 4.0 * np.pi / 3.0) * 0.5
    return float(r), float(g), float(b)


def apply_split_tone(
    x,
    shadow_hue: float,
    shadow_amount: float,
    highlight_hue: float,
    highlight_amount: float,
    balance: float,
    channel: int,
):
    """Tint shadows and highlights toward separate hues.

    ``balance`` moves the shadow/highlight pivot away from 0.5: positive
    values widen the shadow region.
    """
    x = np.asarray(x, dtype=np.float64)
    if shadow_amount < SKIP_EPSILON and highlight_amount < SKIP_EPSILON:
        return x
    pivot = 0.5 + balance * 0.25
    hm = smoothstep(pivot - 0.25, pivot + 0.25, x)
    shadow_offset = hue_to_rgb_offset(shadow_hue)[channel]
    highlight_offset = hue_to_rgb_offset(highlight_hue)[channel]
    offset = shadow_offset * shadow_amount * (1.0 - hm) + highlight_offset * highlight_amount * hm
    return _clamp(x + offset * SPLIT_TONE_STRENGTH)


def apply_color_balance(x, lift: float, gamma: float, gain: float):
    """Lift/gamma/gain for one channel.

    Lift raises blacks with white held, gamma bends midtones with both
    endpoints held, gain scales from black.
    """
    x = np.asarray(x, dtype=np.float64)
    if abs(lift) >= SKIP_EPSILON:
        x = _clamp(x + lift * (1.0 - x))
    if abs(gamma) >= SKIP_EPSILON:
        x = apply_gamma(x, brightness_to_gamma(gamma))
    if abs(gain) >= SKIP_EPSILON:
        x = _clamp(x * (1.0 + gain))
    return x


def apply_clarity(x, clarity: float):
    x = np.asarray(x, dtype=np.float64)
    if abs(clarity) < SKIP_EPSILON:
        return x
    return _clamp(x + (x - 0.5) * clarity * CLARITY_STRENGTH * clarity_mask(x))


def apply_fade(x, fade: float):
    x = np.asarray(x, dtype=np.float64)
    if fade < SKIP_EPSILON:
        return x
    black_level = fade * FADE_STRENGTH
    return _clamp(black_level + x * (1.0 - black_level))


def apply_vibrance(rgb: np.ndarray, vibrance: float) -> np.ndarray:
    """Saturation change weighted toward muted colours.

    :param rgb: Colours [..., 3] in [0, 1]
    :param vibrance: Strength in [-1, 1]
    :returns: Adjusted colours [..., 3] in [0, 1]
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if abs(vibrance) < SKIP_EPSILON:
        return rgb
    mx = rgb.max(axis=-1, keepdims=True)
    mn = rgb.min(axis=-1, keepdims=True)
    sat = np.where(mx > 0, (mx - mn) / np.where(mx > 0, mx, 1.0), 0.0)
    amount = vibrance * (1.0 - sat) ** 2 * 0.5
    gray = rgb.mean(axis=-1, keepdims=True)
    return _clamp(gray + (rgb - gray) * (1.0 + amount))
