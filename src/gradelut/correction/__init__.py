"""Automatic correction derived from image statistics.

Each stage lives in its own module with ``compute`` and LUT builders:

- exposure: median luminance toward a target (1D)
- contrast: p10-p90 range toward a target via an S-curve (1D)
- white_balance: neutral-median channel ratios (1D)
- saturation: over-saturation compression (3D)
- auto: both phases combined into one 3D LUT
"""

from gradelut.correction import auto, contrast, exposure, saturation, stats, white_balance
from gradelut.correction.auto import AutoCorrectionResult, HistogramData, histogram_data_from_image
from gradelut.correction.contrast import ContrastParams, ContrastResult
from gradelut.correction.exposure import ExposureParams, ExposureResult
from gradelut.correction.saturation import SaturationParams, SaturationResult
from gradelut.correction.stats import (
    DEFAULT_ANALYSIS_PARAMS,
    AnalysisParams,
    AutoCorrectionStats,
    ImageClassification,
    LuminanceStats,
    NeutralStats,
    SaturationStats,
    analyze,
)
from gradelut.correction.white_balance import WhiteBalanceParams, WhiteBalanceResult

__all__ = [
    # Stage modules
    "auto",
    "contrast",
    "exposure",
    "saturation",
    "stats",
    "white_balance",
    # Statistics
    "AnalysisParams",
    "AutoCorrectionStats",
    "DEFAULT_ANALYSIS_PARAMS",
    "ImageClassification",
    "LuminanceStats",
    "NeutralStats",
    "SaturationStats",
    "analyze",
    # Stage parameters and results
    "ExposureParams",
    "ExposureResult",
    "ContrastParams",
    "ContrastResult",
    "WhiteBalanceParams",
    "WhiteBalanceResult",
    "SaturationParams",
    "SaturationResult",
    "AutoCorrectionResult",
    "HistogramData",
    "histogram_data_from_image",
]
