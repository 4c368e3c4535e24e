"""Adjustment parameter configuration.

Defines the range and identity value of every Adjustment field. The
field order here is the canonical field order of Adjustment.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from gradelut.config.operations import OperationSpec


def _amount(name: str, description: str, limit: float = 1.0) -> OperationSpec:
    return OperationSpec(
        name=name,
        min_value=-limit,
        max_value=limit,
        neutral=0.0,
        composition="additive",
        description=description,
    )


def _hue(name: str, neutral: float, description: str) -> OperationSpec:
    return OperationSpec(
        name=name,
        min_value=0.0,
        max_value=360.0,
        neutral=neutral,
        composition="replace",
        description=description,
    )


@dataclass(frozen=True)
class AdjustmentConfig:
    """Specifications for all tone adjustment fields."""

    exposure: OperationSpec = _amount("exposure", "Exposure in EV stops, applied in linear light", 2.0)
    highlights: OperationSpec = _amount("highlights", "Offset of the upper tonal half")
    shadows: OperationSpec = _amount("shadows", "Offset of the lower tonal half")
    whites: OperationSpec = _amount("whites", "Offset of the top quarter of the range")
    blacks: OperationSpec = _amount("blacks", "Offset of the bottom quarter of the range")
    brightness: OperationSpec = _amount("brightness", "Gamma-based brightness, endpoints fixed")
    contrast: OperationSpec = _amount("contrast", "Sigmoid contrast; -1 collapses to mid gray")
    temperature: OperationSpec = _amount("temperature", "-1=cool/blue, 1=warm/orange")
    tint: OperationSpec = _amount("tint", "-1=green, 1=magenta")
    clarity: OperationSpec = _amount("clarity", "Midtone contrast, endpoints fixed")
    fade: OperationSpec = OperationSpec(
        name="fade",
        min_value=0.0,
        max_value=1.0,
        neutral=0.0,
        description="Black point lift with white point held",
    )
    vibrance: OperationSpec = _amount("vibrance", "Saturation change weighted toward muted colors")
    split_shadow_hue: OperationSpec = _hue("split_shadow_hue", 220.0, "Split-tone shadow hue (degrees)")
    split_shadow_amount: OperationSpec = OperationSpec(
        name="split_shadow_amount",
        min_value=0.0,
        max_value=1.0,
        neutral=0.0,
        description="Split-tone shadow strength",
    )
    split_highlight_hue: OperationSpec = _hue(
        "split_highlight_hue", 40.0, "Split-tone highlight hue (degrees)"
    )
    split_highlight_amount: OperationSpec = OperationSpec(
        name="split_highlight_amount",
        min_value=0.0,
        max_value=1.0,
        neutral=0.0,
        description="Split-tone highlight strength",
    )
    split_balance: OperationSpec = _amount("split_balance", "Moves the shadow/highlight pivot")
    toe: OperationSpec = OperationSpec(
        name="toe",
        min_value=0.0,
        max_value=1.0,
        neutral=0.0,
        description="Filmic toe: deepens values below 0.3",
    )
    shoulder: OperationSpec = OperationSpec(
        name="shoulder",
        min_value=0.0,
        max_value=1.0,
        neutral=0.0,
        description="Filmic shoulder: rolls off values above 0.7",
    )
    lift_r: OperationSpec = _amount("lift_r", "Red lift")
    lift_g: OperationSpec = _amount("lift_g", "Green lift")
    lift_b: OperationSpec = _amount("lift_b", "Blue lift")
    gamma_r: OperationSpec = _amount("gamma_r", "Red gamma (exponent 2^-x)")
    gamma_g: OperationSpec = _amount("gamma_g", "Green gamma (exponent 2^-x)")
    gamma_b: OperationSpec = _amount("gamma_b", "Blue gamma (exponent 2^-x)")
    gain_r: OperationSpec = _amount("gain_r", "Red gain (multiplier 1+x)")
    gain_g: OperationSpec = _amount("gain_g", "Green gain (multiplier 1+x)")
    gain_b: OperationSpec = _amount("gain_b", "Blue gain (multiplier 1+x)")

    def get_all_specs(self) -> dict[str, OperationSpec]:
        """Get all operation specs as a dictionary.

        :return: Dictionary mapping field names to specs, in field order
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}
