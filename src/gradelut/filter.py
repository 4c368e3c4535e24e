"""Filter: tone adjustment plus master and per-channel curves.

A channel curve, when set, replaces the master curve for that channel.

Example:
    >>> f = Filter.identity().with_adjustment(contrast=0.3, fade=0.1)
    >>> f = f.set_channel("b", Curve((0.05, 0.5, 1.0)))
    >>> graded = f.to_lut().apply(image)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal

import numpy as np

from gradelut.curve import Curve, to_lut as curve_to_lut
from gradelut.lut.lut1d import Lut1D, compose_channel
from gradelut.lut.lut3d import DEFAULT_SIZE, Lut3D
from gradelut.tone import transforms as tf
from gradelut.tone.adjustment import Adjustment, to_lut_float_rgb

logger = logging.getLogger(__name__)

Channel = Literal["r", "g", "b"]
CHANNELS: tuple[Channel, ...] = ("r", "g", "b")


@dataclass(frozen=True)
class Filter:
    """Master curve, optional channel curves and an adjustment.

    Attributes:
        master: Curve used for every channel without its own curve
        r: Optional red curve
        g: Optional green curve
        b: Optional blue curve
        adjustment: Tone adjustment applied before the curves
    """

    master: Curve
    r: Curve | None = None
    g: Curve | None = None
    b: Curve | None = None
    adjustment: Adjustment = Adjustment()

    @classmethod
    def identity(cls, point_count: int = 7) -> Filter:
        return cls(master=Curve.identity(point_count))

    @classmethod
    def from_master(cls, master: Curve) -> Filter:
        return cls(master=master)

    def set_master(self, master: Curve) -> Filter:
        return replace(self, master=master)

    def set_channel(self, channel: Channel, curve: Curve | None) -> Filter:
        """Set or clear one channel curve.

        :raises ValueError: If channel is not 'r', 'g' or 'b'
        """
        if channel not in CHANNELS:
            raise ValueError(f"Unknown channel {channel!r}, expected one of {CHANNELS}")
        return replace(self, **{channel: curve})

    def set_adjustment(self, adjustment: Adjustment) -> Filter:
        return replace(self, adjustment=adjustment)

    def with_adjustment(self, **changes: float) -> Filter:
        """Copy with some adjustment fields changed."""
        return replace(self, adjustment=self.adjustment.replace(**changes))

    def channel_curve(self, channel: Channel) -> Curve:
        """Curve in effect for ``channel``."""
        curve = getattr(self, channel)
        return self.master if curve is None else curve

    def has_channel_curves(self) -> bool:
        return any(getattr(self, c) is not None for c in CHANNELS)

    def split_to_channels(self) -> Filter:
        """Give every channel its own copy of the master curve."""
        return replace(self, r=self.master, g=self.master, b=self.master)

    def merge_to_master(self) -> Filter:
        """Average the channel curves into the master and clear them.

        Channels without a curve contribute the master. Curves of different
        lengths are compared on the master's point positions.
        """
        if not self.has_channel_curves():
            return self

        n = len(self.master)
        xs = np.linspace(0.0, 1.0, n)
        samples = []
        for channel in CHANNELS:
            curve = self.channel_curve(channel)
            if len(curve) == n:
                samples.append(np.asarray(curve.points, dtype=np.float64))
            else:
                samples.append(np.interp(xs, np.linspace(0.0, 1.0, len(curve)), curve.points))
        merged = np.mean(samples, axis=0)
        return replace(self, master=Curve(tuple(merged)), r=None, g=None, b=None)

    def to_lut(self) -> Lut1D:
        """Float per-channel LUT: adjustment, then the channel curves."""
        adjusted = to_lut_float_rgb(self.adjustment)
        if all(getattr(self, c) is None for c in CHANNELS) and self.master.is_identity(1e-6):
            return adjusted

        master_lut = curve_to_lut(self.master)
        tables = {}
        for channel in CHANNELS:
            curve = getattr(self, channel)
            curve_lut = master_lut if curve is None else curve_to_lut(curve)
            tables[channel] = compose_channel(getattr(adjusted, channel), curve_lut)
        return Lut1D(**tables)

    def to_lut3d(self, size: int = DEFAULT_SIZE) -> Lut3D:
        """3D LUT of the filter including vibrance."""
        lut3d = Lut3D.from_lut1d(self.to_lut(), size)
        vibrance = self.adjustment.vibrance
        if abs(vibrance) < tf.SKIP_EPSILON:
            return lut3d
        return lut3d.map_nodes(lambda rgb: tf.apply_vibrance(rgb, vibrance))

    def apply(self, image: np.ndarray) -> np.ndarray:
        """Apply to an 8-bit image, using the 1D path unless vibrance is set."""
        if abs(self.adjustment.vibrance) < tf.SKIP_EPSILON:
            return self.to_lut().apply(image)
        logger.debug("Applying filter with vibrance %.3f", self.adjustment.vibrance)
        return self.to_lut().apply_with_vibrance(image, self.adjustment.vibrance)
