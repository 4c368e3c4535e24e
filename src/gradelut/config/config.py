"""Unified gradelut configuration.

Provides a top-level frozen dataclass holding the adjustment parameter
specifications together with the numeric constants shared by the LUT
builders.
"""

from __future__ import annotations

from dataclasses import dataclass

from gradelut.config.adjustment import AdjustmentConfig


@dataclass(frozen=True)
class GradeConfig:
    """Top-level configuration.

    Attributes:
        adjustment: Per-field adjustment specifications
        lut_size: Number of entries in a 1D LUT channel
        lut3d_size: Default 3D LUT grid side length
        identity_epsilon: Tolerance used by Adjustment.is_identity
        skip_epsilon: Stage parameters below this magnitude are skipped
    """

    adjustment: AdjustmentConfig = AdjustmentConfig()
    lut_size: int = 256
    lut3d_size: int = 17
    identity_epsilon: float = 1e-3
    skip_epsilon: float = 1e-3

    def get_all_specs(self) -> dict[str, dict[str, object]]:
        """Get all operation specs organized by group.

        :return: Nested dictionary of all specifications
        """
        return {"adjustment": self.adjustment.get_all_specs()}


# Main singleton instance
CONFIG = GradeConfig()

ADJUSTMENT_CONFIG = CONFIG.adjustment
