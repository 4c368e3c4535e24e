"""Configuration module for gradelut.

This module provides the parameter specifications of every Adjustment
field together with the shared numeric constants.

Usage:
    from gradelut.config import CONFIG
    CONFIG.adjustment.exposure.max_value  # 2.0
    CONFIG.lut3d_size  # 17

Presets live in ``gradelut.config.presets``; they depend on the tone and
filter modules and are therefore not imported here.
"""

from gradelut.config.adjustment import AdjustmentConfig
from gradelut.config.config import ADJUSTMENT_CONFIG, CONFIG, GradeConfig
from gradelut.config.operations import OperationSpec

__all__ = [
    # Core types
    "OperationSpec",
    "AdjustmentConfig",
    "GradeConfig",
    # Singletons
    "CONFIG",
    "ADJUSTMENT_CONFIG",
]
