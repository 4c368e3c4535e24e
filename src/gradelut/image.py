"""Pixel buffer validation shared by the LUT application functions."""

from __future__ import annotations

import numpy as np


def as_pixels(image: np.ndarray) -> np.ndarray:
    """Validate an 8-bit image and view it as contiguous [N, C] pixels.

    Accepted shapes are [H, W, C] and [N, C] with C of 3 (RGB) or 4 (RGBA).

    :param image: uint8 image array
    :returns: Contiguous uint8 array [N, C]
    :raises ValueError: If dtype or shape is not supported
    """
    image = np.asarray(image)
    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 image, got {image.dtype}")
    if image.ndim not in (2, 3) or image.shape[-1] not in (3, 4):
        raise ValueError(f"Expected image of shape [H, W, 3|4] or [N, 3|4], got {image.shape}")

    pixels = image.reshape(-1, image.shape[-1])
    if not pixels.flags["C_CONTIGUOUS"]:
        pixels = np.ascontiguousarray(pixels)
    return pixels


def rgb_float(pixels: np.ndarray) -> np.ndarray:
    """RGB channels of [N, C] uint8 pixels as float64 in [0, 1]."""
    return pixels[:, :3].astype(np.float64) / 255.0


def quantize(values: np.ndarray) -> np.ndarray:
    """Round values in [0, 1] to uint8, half away from zero."""
    return np.floor(np.clip(values, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def with_rgb(pixels: np.ndarray, rgb: np.ndarray, shape: tuple[int, ...]) -> np.ndarray:
    """Rebuild an image from new RGB values, keeping any alpha channel.

    :param pixels: Original pixels [N, C]
    :param rgb: New colours [N, 3] as uint8
    :param shape: Output shape (the original image shape)
    """
    out = pixels.copy()
    out[:, :3] = rgb
    return out.reshape(shape)
