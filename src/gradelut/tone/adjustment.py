"""Parametric tone adjustment and its LUT generation.

An Adjustment is a flat record of named scalars. Each field defaults to
its identity value, so ``Adjustment()`` changes nothing. LUTs are built
by running the ordered STAGES over the 256 input levels; later stages
see the output of earlier ones.

Example:
    >>> from gradelut.tone import Adjustment, to_lut
    >>> adj = Adjustment(exposure=0.5, contrast=0.2, fade=0.1)
    >>> lut = to_lut(adj)  # uint8 [256]
    >>> rgb = to_lut_float_rgb(adj.replace(temperature=0.3))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, fields, replace

import numpy as np

from gradelut.config.config import ADJUSTMENT_CONFIG, CONFIG
from gradelut.lut.lut1d import Lut1D, quantize_channel
from gradelut.lut.lut3d import Lut3D
from gradelut.tone import transforms as tf

logger = logging.getLogger(__name__)

CHANNEL_FIELDS = (
    "temperature",
    "tint",
    "split_shadow_amount",
    "split_highlight_amount",
    "lift_r",
    "lift_g",
    "lift_b",
    "gamma_r",
    "gamma_g",
    "gamma_b",
    "gain_r",
    "gain_g",
    "gain_b",
)


@dataclass(frozen=True)
class Adjustment:
    """Tone adjustment parameters.

    Amounts are in [-1, 1] unless noted; exposure is in EV stops
    ([-2, 2]); fade, toe, shoulder and split amounts are in [0, 1]; split
    hues are in degrees.
    """

    exposure: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0
    brightness: float = 0.0
    contrast: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0
    clarity: float = 0.0
    fade: float = 0.0
    vibrance: float = 0.0

    # Split toning
    split_shadow_hue: float = 220.0
    split_shadow_amount: float = 0.0
    split_highlight_hue: float = 40.0
    split_highlight_amount: float = 0.0
    split_balance: float = 0.0

    # Filmic curve
    toe: float = 0.0
    shoulder: float = 0.0

    # Color balance
    lift_r: float = 0.0
    lift_g: float = 0.0
    lift_b: float = 0.0
    gamma_r: float = 0.0
    gamma_g: float = 0.0
    gamma_b: float = 0.0
    gain_r: float = 0.0
    gain_g: float = 0.0
    gain_b: float = 0.0

    @classmethod
    def identity(cls) -> Adjustment:
        """Adjustment with every field at its identity value."""
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> Adjustment:
        """Create from a partial mapping; missing fields take identity values.

        :param data: Field name to value
        :returns: Adjustment
        :raises ValueError: If a key is not an Adjustment field
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown adjustment fields: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})

    def to_dict(self, include_identity: bool = True) -> dict[str, float]:
        """Convert to a plain dict.

        :param include_identity: If False, omit fields at their identity value
        """
        data = asdict(self)
        if include_identity:
            return data
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        return {k: v for k, v in data.items() if not specs[k].is_neutral(v)}

    def replace(self, **changes: float) -> Adjustment:
        return replace(self, **changes)

    def __add__(self, other: Adjustment) -> Adjustment:
        """Merge two adjustments.

        Amounts add; split hues take the right operand's value unless it
        is at its identity value.
        """
        if not isinstance(other, Adjustment):
            return NotImplemented
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        return Adjustment(
            **{
                name: spec.combine(getattr(self, name), getattr(other, name))
                for name, spec in specs.items()
            }
        )

    def __radd__(self, other):
        """Support sum() with initial value 0."""
        if other == 0:
            return self
        return self.__add__(other)

    def clamp(self) -> Adjustment:
        """Clamp every field to its configured range."""
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        return Adjustment(**{name: spec.validate(getattr(self, name)) for name, spec in specs.items()})

    def is_identity(self, epsilon: float | None = None) -> bool:
        """True when every field is within ``epsilon`` of its identity value."""
        if epsilon is None:
            epsilon = CONFIG.identity_epsilon
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        return all(spec.is_neutral(getattr(self, name), epsilon) for name, spec in specs.items())

    def has_channel_effects(self) -> bool:
        """True when any per-channel stage would change the output."""
        specs = ADJUSTMENT_CONFIG.get_all_specs()
        return any(
            not specs[name].is_neutral(getattr(self, name), CONFIG.skip_epsilon)
            for name in CHANNEL_FIELDS
        )


# =============================================================================
# Stage pipeline
# =============================================================================

_RGB = "rgb"


@dataclass(frozen=True)
class Stage:
    """One named step of the tone pipeline.

    Attributes:
        name: Stage identifier
        per_channel: True if the stage treats R, G and B differently
        apply: Function (values, adjustment, channel) -> values
    """

    name: str
    per_channel: bool
    apply: Callable[[np.ndarray, Adjustment, int], np.ndarray]


def _color_balance(x: np.ndarray, adj: Adjustment, channel: int) -> np.ndarray:
    c = _RGB[channel]
    return tf.apply_color_balance(
        x,
        getattr(adj, f"lift_{c}"),
        getattr(adj, f"gamma_{c}"),
        getattr(adj, f"gain_{c}"),
    )


STAGES: tuple[Stage, ...] = (
    Stage("exposure", False, lambda x, a, c: tf.apply_exposure(x, a.exposure)),
    Stage(
        "highlights_shadows",
        False,
        lambda x, a, c: tf.apply_highlights_shadows(x, a.highlights, a.shadows),
    ),
    Stage("whites_blacks", False, lambda x, a, c: tf.apply_whites_blacks(x, a.whites, a.blacks)),
    Stage("brightness", False, lambda x, a, c: tf.apply_brightness(x, a.brightness)),
    Stage("contrast", False, lambda x, a, c: tf.apply_contrast(x, a.contrast)),
    Stage("toe", False, lambda x, a, c: tf.apply_toe(x, a.toe)),
    Stage("shoulder", False, lambda x, a, c: tf.apply_shoulder(x, a.shoulder)),
    Stage(
        "temperature_tint",
        True,
        lambda x, a, c: tf.apply_temperature_tint(x, a.temperature, a.tint, c),
    ),
    Stage(
        "split_tone",
        True,
        lambda x, a, c: tf.apply_split_tone(
            x,
            a.split_shadow_hue,
            a.split_shadow_amount,
            a.split_highlight_hue,
            a.split_highlight_amount,
            a.split_balance,
            c,
        ),
    ),
    Stage("color_balance", True, _color_balance),
    Stage("clarity", False, lambda x, a, c: tf.apply_clarity(x, a.clarity)),
    Stage("fade", False, lambda x, a, c: tf.apply_fade(x, a.fade)),
)

STAGE_NAMES: tuple[str, ...] = tuple(stage.name for stage in STAGES)


def _levels() -> np.ndarray:
    return np.arange(CONFIG.lut_size, dtype=np.float64) / (CONFIG.lut_size - 1)


def evaluate(adjustment: Adjustment, values, channel: int | None = None) -> np.ndarray:
    """Run the stage pipeline on arbitrary values.

    :param adjustment: Parameters
    :param values: Input values in [0, 1]
    :param channel: 0/1/2 for R/G/B, or None to skip per-channel stages
    :returns: Output values in [0, 1]
    """
    x = np.asarray(values, dtype=np.float64)
    for stage in STAGES:
        if stage.per_channel and channel is None:
            continue
        x = stage.apply(x, adjustment, channel)
    return np.clip(x, 0.0, 1.0)


def to_lut_float(adjustment: Adjustment) -> np.ndarray:
    """Master LUT (channel-independent stages only).

    :returns: float32 [256] in [0, 1]
    """
    return evaluate(adjustment, _levels()).astype(np.float32)


def to_lut(adjustment: Adjustment) -> np.ndarray:
    """Quantized master LUT.

    :returns: uint8 [256]
    """
    return quantize_channel(to_lut_float(adjustment))


def to_lut_float_rgb(adjustment: Adjustment) -> Lut1D:
    """Per-channel LUT including temperature, tint, split toning and balance.

    Without channel effects all three channels share one array.
    """
    if not adjustment.has_channel_effects():
        return Lut1D.from_master(to_lut_float(adjustment), share=True)

    logger.debug("Building per-channel LUT")
    levels = _levels()
    r, g, b = (evaluate(adjustment, levels, channel).astype(np.float32) for channel in range(3))
    return Lut1D(r=r, g=g, b=b)


def to_lut3d(adjustment: Adjustment, size: int | None = None) -> Lut3D:
    """3D LUT of the full adjustment, including vibrance.

    :param size: Grid side length (default CONFIG.lut3d_size)
    """
    if size is None:
        size = CONFIG.lut3d_size
    lut3d = Lut3D.from_lut1d(to_lut_float_rgb(adjustment), size)
    if abs(adjustment.vibrance) < CONFIG.skip_epsilon:
        return lut3d
    return lut3d.map_nodes(lambda rgb: tf.apply_vibrance(rgb, adjustment.vibrance))


def brightness_to_gamma(brightness: float) -> float:
    return tf.brightness_to_gamma(brightness)


def is_identity(adjustment: Adjustment, epsilon: float | None = None) -> bool:
    return adjustment.is_identity(epsilon)
