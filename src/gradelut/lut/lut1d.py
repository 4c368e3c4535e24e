"""Per-channel 1D lookup tables.

Two explicit types:
- Lut1D: float32 tables in [0, 1], lossless and composable
- QuantizedLut: uint8 tables, the terminal artifact

Quantization is a single conversion step (Lut1D.quantize) and is never
interleaved with composition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from gradelut.image import as_pixels, quantize, with_rgb
from gradelut.lut.kernels import apply_lut1d_numba, apply_table_numba

logger = logging.getLogger(__name__)

LUT_SIZE = 256


def identity_channel() -> np.ndarray:
    """Identity float table: entry i is i/255."""
    return (np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)).astype(np.float32)


def quantize_channel(channel: np.ndarray) -> np.ndarray:
    """Round a float table to uint8 (round(clamp(v) * 255))."""
    return quantize(np.asarray(channel, dtype=np.float64))


def interpolate_channel(channel: np.ndarray, values) -> np.ndarray:
    """Sample a float table at fractional positions with linear interpolation.

    :param channel: Float table [256]
    :param values: Positions in [0, 1]
    :returns: Interpolated table values
    """
    table = np.asarray(channel, dtype=np.float64)
    idx = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0) * (LUT_SIZE - 1)
    lo = np.floor(idx).astype(np.int64)
    hi = np.minimum(lo + 1, LUT_SIZE - 1)
    t = idx - lo
    return table[lo] * (1.0 - t) + table[hi] * t


def compose_channel(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Table equivalent to applying ``first`` then ``second``."""
    return interpolate_channel(second, first).astype(np.float32)


def _readonly(array: np.ndarray, dtype) -> np.ndarray:
    array = np.array(array, dtype=dtype, copy=True)
    if array.shape != (LUT_SIZE,):
        raise ValueError(f"LUT channel must have shape ({LUT_SIZE},), got {array.shape}")
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class Lut1D:
    """Float per-channel LUT.

    Attributes:
        r: Red table, float32 [256] in [0, 1]
        g: Green table
        b: Blue table
    """

    r: np.ndarray
    g: np.ndarray
    b: np.ndarray

    def __post_init__(self):
        # Shared channel arrays stay shared
        cache: dict[int, np.ndarray] = {}
        for name in ("r", "g", "b"):
            src = getattr(self, name)
            if id(src) not in cache:
                cache[id(src)] = _readonly(src, np.float32)
            object.__setattr__(self, name, cache[id(src)])

    @classmethod
    def identity(cls) -> Lut1D:
        return cls(identity_channel(), identity_channel(), identity_channel())

    @classmethod
    def create(cls, r: np.ndarray, g: np.ndarray, b: np.ndarray) -> Lut1D:
        return cls(r, g, b)

    @classmethod
    def from_master(cls, master: np.ndarray, share: bool = False) -> Lut1D:
        """Broadcast one table to all three channels.

        :param master: Float table [256]
        :param share: If True, all channels reference the same array
        """
        if share:
            return cls(master, master, master)
        return cls(np.array(master), np.array(master), np.array(master))

    @classmethod
    def compose(cls, *luts: Lut1D) -> Lut1D:
        """Compose in application order; see :func:`compose`."""
        return compose(*luts)

    @property
    def channels(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.r, self.g, self.b

    def is_identity(self, tolerance: float = 1e-4) -> bool:
        ident = identity_channel()
        return all(np.allclose(ch, ident, atol=tolerance) for ch in self.channels)

    def quantize(self) -> QuantizedLut:
        """Convert to an 8-bit LUT."""
        return QuantizedLut(*(quantize_channel(ch) for ch in self.channels))

    def then(self, other: Lut1D) -> Lut1D:
        """LUT equivalent to applying self, then ``other``."""
        return compose(self, other)

    def apply(self, image: np.ndarray) -> np.ndarray:
        """Apply to an 8-bit image. Alpha is preserved.

        :param image: uint8 [H, W, 3|4] or [N, 3|4]
        :returns: New uint8 image of the same shape
        """
        pixels = as_pixels(image)
        out = np.empty_like(pixels)
        apply_lut1d_numba(pixels, self.r, self.g, self.b, out)
        return out.reshape(np.shape(image))

    def apply_with_vibrance(self, image: np.ndarray, vibrance: float) -> np.ndarray:
        """Apply the tables, then a vibrance change.

        :param image: uint8 [H, W, 3|4] or [N, 3|4]
        :param vibrance: Vibrance in [-1, 1]
        :returns: New uint8 image of the same shape
        """
        from gradelut.tone.transforms import apply_vibrance

        pixels = as_pixels(image)
        idx = pixels[:, :3]
        rgb = np.stack([self.r[idx[:, 0]], self.g[idx[:, 1]], self.b[idx[:, 2]]], axis=-1)
        rgb = apply_vibrance(rgb.astype(np.float64), vibrance)
        return with_rgb(pixels, quantize(rgb), np.shape(image))


def compose(*luts: Lut1D) -> Lut1D:
    """Compose LUTs in application order at float precision.

    ``compose(a, b, c)`` applies a, then b, then c. Intermediate values
    are linearly interpolated between table entries. No LUTs gives the
    identity.
    """
    if not luts:
        return Lut1D.identity()
    r, g, b = (np.array(ch) for ch in luts[0].channels)
    for lut in luts[1:]:
        r = compose_channel(r, lut.r)
        g = compose_channel(g, lut.g)
        b = compose_channel(b, lut.b)
    return Lut1D(r, g, b)


@dataclass(frozen=True)
class QuantizedLut:
    """8-bit per-channel LUT.

    Attributes:
        r: Red table, uint8 [256]
        g: Green table
        b: Blue table
    """

    r: np.ndarray
    g: np.ndarray
    b: np.ndarray

    def __post_init__(self):
        for name in ("r", "g", "b"):
            object.__setattr__(self, name, _readonly(getattr(self, name), np.uint8))

    @classmethod
    def identity(cls) -> QuantizedLut:
        ramp = np.arange(LUT_SIZE, dtype=np.uint8)
        return cls(ramp, ramp.copy(), ramp.copy())

    @classmethod
    def from_master(cls, master: np.ndarray) -> QuantizedLut:
        return cls(np.array(master), np.array(master), np.array(master))

    @classmethod
    def compose(cls, *luts: QuantizedLut) -> QuantizedLut:
        return compose_quantized(*luts)

    @property
    def channels(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.r, self.g, self.b

    def to_float(self) -> Lut1D:
        return Lut1D(*(ch.astype(np.float32) / np.float32(255.0) for ch in self.channels))

    def apply(self, image: np.ndarray) -> np.ndarray:
        """Apply to an 8-bit image. Alpha is preserved."""
        pixels = as_pixels(image)
        out = np.empty_like(pixels)
        apply_table_numba(pixels, self.r, self.g, self.b, out)
        return out.reshape(np.shape(image))


def compose_quantized(*luts: QuantizedLut) -> QuantizedLut:
    """Chain 8-bit LUTs by direct table indexing, in application order."""
    if not luts:
        return QuantizedLut.identity()
    r, g, b = luts[0].channels
    for lut in luts[1:]:
        r, g, b = lut.r[r], lut.g[g], lut.b[b]
    return QuantizedLut(r, g, b)


__all__ = [
    "Lut1D",
    "QuantizedLut",
    "compose",
    "compose_channel",
    "compose_quantized",
    "identity_channel",
    "interpolate_channel",
    "quantize_channel",
]
