"""Per-channel tone profiles: black point, white point and gamma.

Unlike LuminanceProfile, which works on Oklab lightness, a ToneProfile
measures R, G and B independently. Applying a profile's LUT imposes its
tonal range on an image; its inverse LUT removes it. Chaining one
profile's inverse with another's LUT transfers the tone of one image to
another.

Example:
    >>> source = ToneProfile.extract(image)
    >>> target = ToneProfile.extract(reference)
    >>> graded = create_transfer_lut(source, target).apply(image)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from gradelut.image import as_pixels
from gradelut.luminance.profile import LUT_SIZE, detect_black_white_points
from gradelut.lut.lut1d import Lut1D, compose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelTone:
    """Tone parameters of one channel.

    Attributes:
        black_point: Shadow clip level (0-255)
        white_point: Highlight clip level (0-255)
        gamma: Mid-tone exponent in [0.2, 5.0]; above 1 is darker
    """

    black_point: int = 0
    white_point: int = 255
    gamma: float = 1.0

    @classmethod
    def from_histogram(cls, histogram: np.ndarray, percentile: float = 1.0) -> ChannelTone:
        """Measure a channel from its 256-bin histogram.

        The gamma assumes evenly spread input: it solves 0.5**gamma for the
        mean of the occupied range, normalised between the two points.
        """
        histogram = np.asarray(histogram, dtype=np.int64)
        total = int(histogram.sum())
        black, white = detect_black_white_points(histogram, total, percentile)

        levels = np.arange(black, white + 1)
        counts = histogram[black : white + 1]
        count = int(counts.sum())
        mean = float(levels @ counts) / count if count > 0 else 127.5

        span = white - black
        normalized = (mean - black) / span if span > 0 else 0.5
        gamma = math.log(normalized) / math.log(0.5) if 0.01 < normalized < 0.99 else 1.0
        return cls(black, white, min(5.0, max(0.2, gamma)))

    def to_lut(self) -> np.ndarray:
        """``x**gamma`` rescaled onto [black_point, white_point], float32 [256]."""
        x = np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)
        out = (self.black_point + np.power(x, self.gamma) * (self.white_point - self.black_point)) / 255.0
        return np.clip(out, 0.0, 1.0).astype(np.float32)

    def to_inverse_lut(self) -> np.ndarray:
        """Stretch [black_point, white_point] to [0, 1] and undo the gamma."""
        span = self.white_point - self.black_point
        if span <= 0:
            return (np.arange(LUT_SIZE, dtype=np.float64) / (LUT_SIZE - 1)).astype(np.float32)
        x = np.clip((np.arange(LUT_SIZE, dtype=np.float64) - self.black_point) / span, 0.0, 1.0)
        return np.clip(np.power(x, 1.0 / self.gamma), 0.0, 1.0).astype(np.float32)


@dataclass(frozen=True)
class ToneProfile:
    """Tone parameters of the R, G and B channels."""

    r: ChannelTone = ChannelTone()
    g: ChannelTone = ChannelTone()
    b: ChannelTone = ChannelTone()

    @classmethod
    def neutral(cls) -> ToneProfile:
        return cls()

    @classmethod
    def extract(cls, image: np.ndarray, percentile: float = 1.0) -> ToneProfile:
        """Measure the tone profile of an 8-bit image.

        :param image: uint8 [H, W, 3|4] or [N, 3|4]
        :param percentile: Share of pixels (0-100) ignored at each end
        :returns: ToneProfile; an empty image gives the neutral profile
        """
        pixels = as_pixels(image)
        if pixels.shape[0] == 0:
            return cls.neutral()
        r, g, b = (np.bincount(pixels[:, c], minlength=LUT_SIZE) for c in range(3))
        profile = cls.from_histograms(r, g, b, percentile)
        logger.debug("Extracted tone profile: %s", profile)
        return profile

    @classmethod
    def from_histograms(
        cls, r: np.ndarray, g: np.ndarray, b: np.ndarray, percentile: float = 1.0
    ) -> ToneProfile:
        return cls(
            ChannelTone.from_histogram(r, percentile),
            ChannelTone.from_histogram(g, percentile),
            ChannelTone.from_histogram(b, percentile),
        )

    @property
    def channels(self) -> tuple[ChannelTone, ChannelTone, ChannelTone]:
        return (self.r, self.g, self.b)

    def to_lut(self) -> Lut1D:
        """LUT that imposes this profile's tone."""
        return Lut1D(*(tone.to_lut() for tone in self.channels))

    def to_inverse_lut(self) -> Lut1D:
        """LUT that removes this profile's tone."""
        return Lut1D(*(tone.to_inverse_lut() for tone in self.channels))


def create_transfer_lut(source: ToneProfile, target: ToneProfile) -> Lut1D:
    """Remove ``source``'s tone, then impose ``target``'s.

    :param source: Profile of the image being graded
    :param target: Profile of the reference look
    :returns: Composed float LUT
    """
    return compose(source.to_inverse_lut(), target.to_lut())
