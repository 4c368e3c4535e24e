"""Built-in grading presets.

A preset is plain data: partial Adjustment overrides, an optional master
curve and an optional 3D LUT generator. Presets are grouped into the
categories listed in CATEGORY_LABELS.

Example:
    >>> from gradelut.config.presets import get_preset, to_filter
    >>> graded = to_filter(get_preset("kodak-portra-400")).apply(image)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Literal

from gradelut.curve import Curve
from gradelut.filter import Filter
from gradelut.lut.lut3d import DEFAULT_SIZE, Lut3D
from gradelut.lut.lut3d import compose as compose_3d
from gradelut.tone.adjustment import Adjustment

PresetCategory = Literal["film", "cinematic", "vintage", "bw", "creative"]

CATEGORY_LABELS: dict[str, str] = {
    "film": "Film",
    "cinematic": "Cinematic",
    "vintage": "Vintage",
    "bw": "B&W",
    "creative": "Creative",
}


@dataclass(frozen=True)
class Preset:
    """A named look.

    Attributes:
        id: Stable identifier
        name: Display name
        category: One of CATEGORY_LABELS
        description: Short description of the look
        adjustment: Adjustment applied on top of the identity
        master_points: Optional master curve control points
        lut3d: Optional 3D LUT generator taking the grid size
    """

    id: str
    name: str
    category: PresetCategory
    description: str = ""
    adjustment: Adjustment = Adjustment()
    master_points: tuple[float, ...] | None = None
    lut3d: Callable[[int], Lut3D] | None = None


def _adjust(id: str, name: str, category: PresetCategory, description: str, **values: float) -> Preset:
    return Preset(id, name, category, description, Adjustment.from_dict(values))


def _grid(id: str, name: str, category: PresetCategory, description: str, generator) -> Preset:
    return Preset(id, name, category, description, lut3d=generator)


def _split(shadow_hue, shadow_amount, highlight_hue, highlight_amount) -> dict[str, float]:
    return {
        "split_shadow_hue": shadow_hue,
        "split_shadow_amount": shadow_amount,
        "split_highlight_hue": highlight_hue,
        "split_highlight_amount": highlight_amount,
    }


# =============================================================================
# Film emulation
# =============================================================================

FILM_PRESETS = (
    _adjust(
        "kodak-portra-400", "Kodak Portra 400", "film",
        "Warm skin tones with soft contrast and lifted shadows",
        exposure=0.05, contrast=0.1, highlights=-0.15, shadows=0.2, fade=0.08,
        temperature=0.1, vibrance=-0.1, toe=0.25, shoulder=0.3,
        **_split(220, 0.08, 45, 0.1),
    ),
    _adjust(
        "kodak-portra-160", "Kodak Portra 160", "film",
        "Subtle warmth with lower contrast than Portra 400",
        contrast=0.05, highlights=-0.1, shadows=0.15, fade=0.05, temperature=0.08,
        vibrance=-0.05, toe=0.2, shoulder=0.25,
        **_split(210, 0.05, 40, 0.08),
    ),
    _adjust(
        "fuji-pro-400h", "Fuji Pro 400H", "film",
        "Cool pastel tones with lifted shadows",
        exposure=0.1, contrast=0.05, highlights=-0.2, shadows=0.25, fade=0.1,
        temperature=-0.08, vibrance=-0.15, toe=0.15, shoulder=0.35, lift_b=0.05,
        **_split(200, 0.12, 180, 0.05),
    ),
    _adjust(
        "kodak-ektar-100", "Kodak Ektar 100", "film",
        "Punchy colours with strong contrast",
        contrast=0.2, highlights=-0.1, shadows=0.1, vibrance=0.15, toe=0.3,
        shoulder=0.2, temperature=0.05,
        **_split(230, 0.05, 35, 0.08),
    ),
    _adjust(
        "fuji-velvia-50", "Fuji Velvia 50", "film",
        "High saturation with deep blacks",
        contrast=0.3, highlights=-0.15, shadows=-0.1, vibrance=0.25, toe=0.35,
        shoulder=0.15,
        **_split(240, 0.08, 30, 0.1),
    ),
    _adjust(
        "kodachrome-64", "Kodachrome 64", "film",
        "Warm reds and yellows with strong contrast",
        contrast=0.25, highlights=-0.1, shadows=0.05, vibrance=0.1, temperature=0.12,
        toe=0.4, shoulder=0.2, gain_r=0.05,
        **_split(210, 0.1, 40, 0.12),
    ),
)

# =============================================================================
# Cinematic
# =============================================================================

CINEMATIC_PRESETS = (
    _adjust(
        "teal-orange", "Teal & Orange", "cinematic",
        "Teal shadows with warm orange highlights",
        contrast=0.2, highlights=-0.1, shadows=0.1, toe=0.2, shoulder=0.25,
        lift_b=0.08, gain_r=0.08,
        **_split(195, 0.2, 35, 0.18),
    ),
    _adjust(
        "blockbuster", "Blockbuster", "cinematic",
        "High contrast with crushed blacks and controlled highlights",
        contrast=0.35, highlights=-0.2, shadows=0.15, blacks=-0.1, toe=0.3,
        shoulder=0.3, fade=0.03,
        **_split(220, 0.15, 40, 0.1),
    ),
    _adjust(
        "noir", "Film Noir", "cinematic",
        "Dark, desaturated and very contrasty",
        contrast=0.4, brightness=-0.1, highlights=-0.25, shadows=-0.1, blacks=-0.15,
        toe=0.4, shoulder=0.2, vibrance=-0.3,
        **_split(230, 0.1, 50, 0.05),
    ),
)

# =============================================================================
# Vintage
# =============================================================================

VINTAGE_PRESETS = (
    _adjust(
        "vintage-warm", "Vintage Warm", "vintage",
        "Faded warm print",
        contrast=0.1, highlights=-0.15, shadows=0.2, fade=0.15, temperature=0.15,
        vibrance=-0.2, toe=0.2, shoulder=0.35,
        **_split(40, 0.1, 45, 0.15),
    ),
    _adjust(
        "vintage-cool", "Vintage Cool", "vintage",
        "Faded cool print",
        contrast=0.1, highlights=-0.15, shadows=0.2, fade=0.15, temperature=-0.1,
        vibrance=-0.2, toe=0.2, shoulder=0.35,
        **_split(210, 0.15, 200, 0.1),
    ),
    _adjust(
        "faded-memories", "Faded Memories", "vintage",
        "Low contrast with strong fade and muted colour",
        contrast=-0.1, highlights=-0.2, shadows=0.3, fade=0.25, vibrance=-0.35,
        toe=0.1, shoulder=0.4, temperature=0.05,
        **_split(220, 0.08, 45, 0.1),
    ),
)

# =============================================================================
# Black and white
# =============================================================================

BW_PRESETS = (
    _adjust(
        "bw-classic", "B&W Classic", "bw",
        "Neutral monochrome",
        vibrance=-1.0, contrast=0.2, highlights=-0.1, shadows=0.1, toe=0.25, shoulder=0.2,
    ),
    _adjust(
        "bw-high-contrast", "B&W High Contrast", "bw",
        "Hard monochrome with deep blacks",
        vibrance=-1.0, contrast=0.5, highlights=-0.15, shadows=-0.1, blacks=-0.1,
        toe=0.4, shoulder=0.15, clarity=0.2,
    ),
    _adjust(
        "bw-soft", "B&W Soft", "bw",
        "Soft faded monochrome",
        vibrance=-1.0, contrast=0.05, highlights=-0.2, shadows=0.25, fade=0.1,
        toe=0.15, shoulder=0.35, clarity=-0.1,
    ),
)

# =============================================================================
# Creative
# =============================================================================

CREATIVE_PRESETS = (
    _adjust(
        "dreamy", "Dreamy", "creative",
        "Soft, hazy and bright",
        contrast=-0.15, highlights=-0.25, shadows=0.3, fade=0.2, vibrance=-0.1,
        clarity=-0.3, shoulder=0.4, split_highlight_hue=300, split_highlight_amount=0.1,
    ),
    _adjust(
        "cross-process", "Cross Process", "creative",
        "Shifted colours of cross-processed slide film",
        contrast=0.25, highlights=-0.1, shadows=0.15, toe=0.3, shoulder=0.25,
        lift_b=0.1, gain_r=0.1, gain_g=-0.05,
        **_split(180, 0.2, 60, 0.15),
    ),
    _adjust(
        "punch", "Punch", "creative",
        "Bold contrast and colour",
        contrast=0.35, clarity=0.25, vibrance=0.2, highlights=-0.15, shadows=0.2,
        toe=0.35, shoulder=0.15,
    ),
)

# =============================================================================
# Colour grid (3D LUT) presets
# =============================================================================

LUT3D_PRESETS = (
    _grid("lut3d-red-to-cyan", "Red → Cyan", "creative", "Turns reds cyan",
          partial(Lut3D.hue_shift, 0, 180, 40, 1.0)),
    _grid("lut3d-orange-to-teal", "Orange → Teal", "creative", "Turns oranges teal",
          partial(Lut3D.hue_shift, 30, 180, 35, 1.0)),
    _grid("lut3d-boost-blue-sat", "Blue Boost", "creative", "More saturated blues",
          partial(Lut3D.hue_saturation, 210, 0.5, 40)),
    _grid("lut3d-boost-red-sat", "Red Boost", "creative", "More saturated reds",
          partial(Lut3D.hue_saturation, 0, 0.5, 35)),
    _grid("lut3d-desaturate-green", "Muted Greens", "creative", "Strongly desaturated greens",
          partial(Lut3D.hue_saturation, 120, -0.6, 50)),
    _grid("lut3d-swap-rgb-gbr", "RGB → GBR", "creative", "Rotates the channels",
          partial(Lut3D.channel_swap, ("g", "b", "r"))),
    _grid("lut3d-swap-rgb-brg", "RGB → BRG", "creative", "Rotates the channels the other way",
          partial(Lut3D.channel_swap, ("b", "r", "g"))),
    _grid("lut3d-skin-warm", "Skin Warm", "film", "Nudges skin tones toward orange",
          partial(Lut3D.hue_shift, 20, 28, 25, 0.5)),
    _grid("lut3d-skin-smooth", "Skin Smooth", "film", "Slightly calmer skin tones",
          partial(Lut3D.hue_saturation, 20, -0.15, 30)),
    _grid("lut3d-sky-enhance", "Sky Enhance", "film", "Richer sky blues",
          partial(Lut3D.hue_saturation, 200, 0.2, 45)),
    _grid("lut3d-foliage-natural", "Foliage Natural", "film", "Pulls greens toward yellow",
          partial(Lut3D.hue_shift, 120, 100, 35, 0.5)),
    _grid("lut3d-autumn-warmth", "Autumn Warmth", "film", "Richer oranges and yellows",
          partial(Lut3D.hue_saturation, 40, 0.25, 40)),
    _grid("lut3d-muted-greens", "Neutralize Greens", "film", "Calmer greens",
          partial(Lut3D.hue_saturation, 120, -0.35, 45)),
    _grid("lut3d-fix-fluorescent", "Fix Fluorescent", "film", "Removes the green cast of tube lighting",
          partial(Lut3D.hue_saturation, 100, -0.35, 45)),
)

PRESETS: tuple[Preset, ...] = (
    FILM_PRESETS + CINEMATIC_PRESETS + VINTAGE_PRESETS + BW_PRESETS + CREATIVE_PRESETS + LUT3D_PRESETS
)

_PRESETS_BY_ID = {preset.id: preset for preset in PRESETS}


# =============================================================================
# Lookup
# =============================================================================


def get_preset(preset_id: str) -> Preset:
    """Get a preset by id.

    :param preset_id: Preset identifier (case-insensitive)
    :returns: Preset
    :raises ValueError: If no preset has this id
    """
    preset = _PRESETS_BY_ID.get(preset_id.lower())
    if preset is None:
        available = ", ".join(sorted(_PRESETS_BY_ID))
        raise ValueError(f"Unknown preset '{preset_id}'. Available: {available}")
    return preset


def list_presets() -> list[str]:
    return [preset.id for preset in PRESETS]


def category_label(category: str) -> str:
    """Display label of a category; unknown categories are returned as-is."""
    return CATEGORY_LABELS.get(category, category)


def group_by_category(presets=PRESETS) -> dict[str, list[Preset]]:
    """Group presets by category, in CATEGORY_LABELS order.

    Empty categories are omitted.
    """
    groups: dict[str, list[Preset]] = {category: [] for category in CATEGORY_LABELS}
    for preset in presets:
        groups.setdefault(preset.category, []).append(preset)
    return {category: items for category, items in groups.items() if items}


# =============================================================================
# Conversion
# =============================================================================


def to_filter(preset: Preset, point_count: int = 7) -> Filter:
    """Filter holding the preset's adjustment and master curve."""
    if preset.master_points is not None:
        base = Filter.from_master(Curve(tuple(preset.master_points)))
    else:
        base = Filter.identity(point_count)
    return base.set_adjustment(base.adjustment + preset.adjustment)


def to_lut3d(preset: Preset, size: int = DEFAULT_SIZE) -> Lut3D:
    """3D LUT of the preset.

    Presets with a colour grid use it, preceded by the filter when the
    preset also carries tone settings.
    """
    if preset.lut3d is None:
        return to_filter(preset).to_lut3d(size)
    grid = preset.lut3d(size)
    if preset.adjustment.is_identity() and preset.master_points is None:
        return grid
    return compose_3d(to_filter(preset).to_lut3d(size), grid)
