"""Parameter specifications for tone adjustment fields.

Each scalar field of an Adjustment is described by an OperationSpec that
records its allowed range, identity value and how two values merge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class OperationSpec:
    """Range and merge rule of one Adjustment field.

    Attributes:
        name: Adjustment field, e.g. "exposure" or "split_shadow_hue"
        min_value: Lower clamp bound
        max_value: Upper clamp bound
        neutral: Value at which the stage is skipped
        composition: "additive" for offsets, "replace" for hue angles
        description: Slider label text
    """

    name: str
    min_value: float
    max_value: float
    neutral: float
    composition: Literal["additive", "replace"] = "additive"
    description: str = ""

    def validate(self, value: float) -> float:
        """Clamp an adjustment value into this field's range.

        Out-of-range values are clamped, not rejected.

        :param value: Requested field value
        :returns: Value in [min_value, max_value], as float
        :raises ValueError: For booleans and non-numeric values
        """
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError(f"{self.name}: expected number, got {type(value).__name__}")

        return max(self.min_value, min(self.max_value, float(value)))

    def is_neutral(self, value: float, tolerance: float = 1e-3) -> bool:
        """True if ``value`` leaves the tone curve unchanged.

        The default tolerance matches the stage skip threshold, so a field
        reported neutral here is also skipped when building LUTs.
        """
        return abs(value - self.neutral) < tolerance

    def combine(self, a: float, b: float) -> float:
        """Merge two values of this field, as when stacking adjustments.

        Additive fields sum their deviations from neutral. Replace fields
        (hues) take ``b`` unless it is neutral.

        :param a: Base value
        :param b: Value layered on top
        :returns: Merged value, unclamped
        """
        if self.composition == "replace":
            return a if self.is_neutral(b) else b
        return a + b - self.neutral

    def __repr__(self) -> str:
        return (
            f"OperationSpec({self.name}, "
            f"range=[{self.min_value}, {self.max_value}], "
            f"neutral={self.neutral}, {self.composition})"
        )
