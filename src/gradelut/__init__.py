"""
gradelut - Colour grading lookup tables

CPU colour grading built from 256-entry tone LUTs and trilinear 3D LUTs.

Features:
- Monotone tone curves (Fritsch-Carlson PCHIP) baked into LUTs
- Parametric adjustments: exposure, tone ranges, contrast, white balance,
  split toning, film toe/shoulder, lift/gamma/gain and vibrance
- 1D LUT composition at float or 8-bit precision
- 3D LUTs: hue shift, hue saturation, channel swap, composition
- Oklab luminance profiles with inverse-CDF, polynomial, spline and
  normalize curve fits
- Per-channel tone profiles and tone transfer between images
- Image analysis: histogram moments, key, tonal zones, saturation, clipping
- Guarded automatic exposure, contrast, white balance and saturation
- Built-in film, cinematic, vintage, B&W and creative presets

Example - Filter:
    >>> from gradelut import Filter, Curve
    >>>
    >>> f = Filter.identity().with_adjustment(exposure=0.3, contrast=0.2)
    >>> f = f.set_channel("b", Curve((0.05, 0.5, 1.0)))
    >>> graded = f.apply(image)  # uint8 [H, W, 3|4]

Example - Auto correction:
    >>> from gradelut.correction import auto
    >>>
    >>> lut, result = auto.create_lut_from_original(auto.histogram_data_from_image(image))
    >>> print(auto.get_summary(result))
    >>> graded = lut.apply(image)

Example - Presets:
    >>> from gradelut import get_preset, preset_to_filter
    >>>
    >>> graded = preset_to_filter(get_preset("teal-orange")).apply(image)
"""

__version__ = "0.1.0"

# Tone curves
from gradelut.curve import Curve

# Configuration
from gradelut.config import ADJUSTMENT_CONFIG, CONFIG, AdjustmentConfig, GradeConfig, OperationSpec

# Lookup tables
from gradelut.lut import Lut1D, Lut3D, QuantizedLut, compose, compose_3d

# Tone adjustment
from gradelut.tone import Adjustment, to_lut, to_lut3d, to_lut_float, to_lut_float_rgb

# Filter and presets
from gradelut.filter import Filter
from gradelut.config.presets import (
    CATEGORY_LABELS,
    PRESETS,
    Preset,
    category_label,
    get_preset,
    group_by_category,
)
from gradelut.config.presets import to_filter as preset_to_filter
from gradelut.config.presets import to_lut3d as preset_to_lut3d

# Luminance profiles
from gradelut.luminance import LuminanceProfile, NormalizeParams, ToneProfile, create_transfer_lut

# Image analysis
from gradelut.analysis import ImageAnalysis, analyze

# Automatic correction
from gradelut.correction import AutoCorrectionResult, HistogramData, histogram_data_from_image

__all__ = [
    "__version__",
    # Curves
    "Curve",
    # Configuration
    "CONFIG",
    "ADJUSTMENT_CONFIG",
    "AdjustmentConfig",
    "GradeConfig",
    "OperationSpec",
    # Lookup tables
    "Lut1D",
    "QuantizedLut",
    "Lut3D",
    "compose",
    "compose_3d",
    # Tone adjustment
    "Adjustment",
    "to_lut",
    "to_lut3d",
    "to_lut_float",
    "to_lut_float_rgb",
    # Filter and presets
    "Filter",
    "Preset",
    "PRESETS",
    "CATEGORY_LABELS",
    "category_label",
    "get_preset",
    "group_by_category",
    "preset_to_filter",
    "preset_to_lut3d",
    # Luminance profiles
    "LuminanceProfile",
    "NormalizeParams",
    "ToneProfile",
    "create_transfer_lut",
    # Image analysis
    "ImageAnalysis",
    "analyze",
    # Automatic correction
    "AutoCorrectionResult",
    "HistogramData",
    "histogram_data_from_image",
]
