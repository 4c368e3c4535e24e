"""3D colour lookup tables with trilinear interpolation.

The grid is stored flat: node (r, g, b) occupies
``data[(r + g*size + b*size*size) * 3 : ... + 3]``, so the red index
varies fastest.

Example:
    >>> lut = Lut3D.hue_shift(source_hue=30, target_hue=180, hue_range=35)
    >>> graded = lut.apply(image)  # uint8 [H, W, 4]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np

from gradelut.color.hsl import hsl_to_rgb, hue_difference, rgb_to_hsl
from gradelut.image import as_pixels
from gradelut.lut.kernels import apply_lut3d_numba
from gradelut.lut.lut1d import Lut1D

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 17

_CHANNEL_INDEX = {"r": 0, "g": 1, "b": 2}


def _grid(size: int) -> np.ndarray:
    """Normalised node coordinates [size^3, 3] in storage order."""
    axis = np.arange(size, dtype=np.float64) / (size - 1)
    b, g, r = np.meshgrid(axis, axis, axis, indexing="ij")
    return np.stack([r.ravel(), g.ravel(), b.ravel()], axis=-1)


@dataclass(frozen=True)
class Lut3D:
    """Cubic RGB -> RGB grid.

    Attributes:
        size: Grid side length (>= 2)
        data: Flat float32 array [size^3 * 3] in [0, 1]
    """

    size: int
    data: np.ndarray

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"Lut3D size must be >= 2, got {self.size}")
        data = np.array(self.data, dtype=np.float32, copy=True).ravel()
        expected = self.size**3 * 3
        if data.shape[0] != expected:
            raise ValueError(
                f"Lut3D of size {self.size} needs {expected} values, got {data.shape[0]}"
            )
        data.flags.writeable = False
        object.__setattr__(self, "data", data)

    @classmethod
    def identity(cls, size: int = DEFAULT_SIZE) -> Lut3D:
        """Grid whose every node maps to its own coordinate."""
        if size < 2:
            raise ValueError(f"Lut3D size must be >= 2, got {size}")
        return cls(size, _grid(size).ravel())

    @classmethod
    def create(cls, size: int, data) -> Lut3D:
        return cls(size, np.asarray(data))

    @classmethod
    def from_lut1d(cls, lut: Lut1D, size: int = DEFAULT_SIZE) -> Lut3D:
        """Bake a per-channel 1D LUT into a grid.

        Node i on each axis samples table entry ``round(i/(size-1)*255)``.
        """
        if size < 2:
            raise ValueError(f"Lut3D size must be >= 2, got {size}")
        idx = np.floor(np.arange(size) / (size - 1) * 255.0 + 0.5).astype(np.int64)
        r = np.asarray(lut.r, dtype=np.float64)[idx]
        g = np.asarray(lut.g, dtype=np.float64)[idx]
        b = np.asarray(lut.b, dtype=np.float64)[idx]
        bb, gg, rr = np.meshgrid(b, g, r, indexing="ij")
        return cls(size, np.stack([rr.ravel(), gg.ravel(), bb.ravel()], axis=-1).ravel())

    def nodes(self) -> np.ndarray:
        """Node colours as [size^3, 3] float64 (copy)."""
        return self.data.reshape(-1, 3).astype(np.float64)

    def map_nodes(self, fn: Callable[[np.ndarray], np.ndarray]) -> Lut3D:
        """New LUT with ``fn`` applied to every node colour.

        :param fn: Function of colours [M, 3] in [0, 1] returning [M, 3]
        """
        out = np.clip(np.asarray(fn(self.nodes()), dtype=np.float64), 0.0, 1.0)
        return Lut3D(self.size, out.ravel())

    def is_identity(self, tolerance: float = 1e-6) -> bool:
        return bool(np.allclose(self.nodes(), _grid(self.size), atol=tolerance))

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def lookup_many(self, rgb: np.ndarray) -> np.ndarray:
        """Trilinear lookup of many colours.

        :param rgb: Colours [..., 3] in [0, 1] (clamped)
        :returns: Mapped colours [..., 3] as float64
        """
        rgb = np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0)
        shape = rgb.shape
        pts = rgb.reshape(-1, 3) * (self.size - 1)
        lo = np.floor(pts).astype(np.int64)
        lo = np.minimum(lo, self.size - 1)
        hi = np.minimum(lo + 1, self.size - 1)
        t = pts - lo

        grid = self.data.reshape(-1, 3).astype(np.float64)
        s = self.size

        def node(ri, gi, bi):
            return grid[ri + gi * s + bi * s * s]

        tr, tg, tb = t[:, 0:1], t[:, 1:2], t[:, 2:3]
        r0, g0, b0 = lo[:, 0], lo[:, 1], lo[:, 2]
        r1, g1, b1 = hi[:, 0], hi[:, 1], hi[:, 2]

        # r, then g, then b
        c00 = node(r0, g0, b0) + (node(r1, g0, b0) - node(r0, g0, b0)) * tr
        c10 = node(r0, g1, b0) + (node(r1, g1, b0) - node(r0, g1, b0)) * tr
        c01 = node(r0, g0, b1) + (node(r1, g0, b1) - node(r0, g0, b1)) * tr
        c11 = node(r0, g1, b1) + (node(r1, g1, b1) - node(r0, g1, b1)) * tr
        c0 = c00 + (c10 - c00) * tg
        c1 = c01 + (c11 - c01) * tg
        return (c0 + (c1 - c0) * tb).reshape(shape)

    def lookup(self, r: float, g: float, b: float) -> tuple[float, float, float]:
        """Trilinear lookup of a single colour in [0, 1]."""
        out = self.lookup_many(np.array([r, g, b], dtype=np.float64))
        return float(out[0]), float(out[1]), float(out[2])

    def apply(self, image: np.ndarray) -> np.ndarray:
        """Apply to an 8-bit image. Alpha is preserved.

        :param image: uint8 [H, W, 3|4] or [N, 3|4]
        :returns: New uint8 image of the same shape
        """
        pixels = as_pixels(image)
        out = np.empty_like(pixels)
        apply_lut3d_numba(pixels, self.data, self.size, out)
        return out.reshape(np.shape(image))

    def then(self, other: Lut3D) -> Lut3D:
        return compose(self, other)

    # ------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------

    @classmethod
    def channel_swap(cls, mapping: Sequence[str], size: int = DEFAULT_SIZE) -> Lut3D:
        """Route input channels to output channels.

        ``mapping[i]`` names the input channel written to output channel i,
        so ``("g", "b", "r")`` puts green into red.

        :raises ValueError: If mapping is not three of 'r', 'g', 'b'
        """
        if len(mapping) != 3 or any(c not in _CHANNEL_INDEX for c in mapping):
            raise ValueError(f"Channel mapping must be three of 'r', 'g', 'b', got {mapping!r}")
        order = [_CHANNEL_INDEX[c] for c in mapping]
        grid = _grid(size)
        return cls(size, grid[:, order].ravel())

    @classmethod
    def hue_shift(
        cls,
        source_hue: float,
        target_hue: float,
        hue_range: float = 30.0,
        strength: float = 1.0,
        size: int = DEFAULT_SIZE,
    ) -> Lut3D:
        """Rotate hues near ``source_hue`` toward ``target_hue``.

        The shift falls off linearly with hue distance and is zero beyond
        ``hue_range`` degrees.
        """
        grid = _grid(size)
        h, s, light = rgb_to_hsl(grid)
        diff = hue_difference(h, source_hue)
        factor = np.where(diff < hue_range, (1.0 - diff / hue_range) * strength, 0.0)
        shift = ((target_hue - source_hue + 540.0) % 360.0) - 180.0
        h = (h + shift * factor + 360.0) % 360.0
        return cls(size, np.clip(hsl_to_rgb(h, s, light), 0.0, 1.0).ravel())

    @classmethod
    def hue_saturation(
        cls,
        target_hue: float,
        saturation_boost: float,
        hue_range: float = 30.0,
        size: int = DEFAULT_SIZE,
    ) -> Lut3D:
        """Change HSL saturation of hues near ``target_hue``.

        :param saturation_boost: Added saturation at the centre hue, in [-1, 1]
        """
        grid = _grid(size)
        h, s, light = rgb_to_hsl(grid)
        diff = hue_difference(h, target_hue)
        factor = np.where(diff < hue_range, 1.0 - diff / hue_range, 0.0)
        s = np.clip(s + saturation_boost * factor, 0.0, 1.0)
        return cls(size, np.clip(hsl_to_rgb(h, s, light), 0.0, 1.0).ravel())

    def to_texture_2d(self) -> np.ndarray:
        """Pack into an RGBA8 strip for GPU upload.

        Blue slices are stacked vertically: the result has shape
        [size*size, size, 4] and texel (x=r, y=g + b*size) holds node (r, g, b).
        """
        s = self.size
        rgb = np.floor(np.clip(self.nodes(), 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
        out = np.full((s * s * s, 4), 255, dtype=np.uint8)
        out[:, :3] = rgb
        return out.reshape(s * s, s, 4)


def compose(first: Lut3D, second: Lut3D) -> Lut3D:
    """LUT equivalent to applying ``first``, then ``second``.

    The result has the grid size of ``first``; ``second`` is sampled with
    trilinear interpolation at every node output of ``first``.
    """
    logger.debug("Composing 3D LUTs of size %d and %d", first.size, second.size)
    return Lut3D(first.size, second.lookup_many(first.nodes()).ravel())


def lookup(lut: Lut3D, r: float, g: float, b: float) -> tuple[float, float, float]:
    return lut.lookup(r, g, b)
