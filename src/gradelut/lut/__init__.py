"""Lookup tables: float and 8-bit 1D LUTs, trilinear 3D LUTs."""

from gradelut.lut.lut1d import (
    Lut1D,
    QuantizedLut,
    compose,
    compose_channel,
    compose_quantized,
    identity_channel,
    quantize_channel,
)
from gradelut.lut.lut3d import Lut3D, lookup
from gradelut.lut.lut3d import compose as compose_3d

__all__ = [
    # 1D
    "Lut1D",
    "QuantizedLut",
    "compose",
    "compose_channel",
    "compose_quantized",
    "identity_channel",
    "quantize_channel",
    # 3D
    "Lut3D",
    "compose_3d",
    "lookup",
]
