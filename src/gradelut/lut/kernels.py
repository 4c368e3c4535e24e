"""Numba-optimized kernels for applying LUTs to pixel buffers.

Every output pixel depends only on its own input pixel and the read-only
table, so all kernels parallelise over pixels with prange. Channels past
the third (alpha) are copied unchanged.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray


@njit(inline="always", fastmath=True, cache=True)
def _to_u8(v: float) -> np.uint8:
    if v <= 0.0:
        return np.uint8(0)
    if v >= 1.0:
        return np.uint8(255)
    return np.uint8(int(v * 255.0 + 0.5))


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_lut1d_numba(
    pixels: NDArray[np.uint8],
    lut_r: NDArray[np.float32],
    lut_g: NDArray[np.float32],
    lut_b: NDArray[np.float32],
    out: NDArray[np.uint8],
) -> None:
    """Apply per-channel float tables.

    :param pixels: Input pixels [N, C] with C >= 3
    :param lut_r: Red table [256] in [0, 1]
    :param lut_g: Green table [256] in [0, 1]
    :param lut_b: Blue table [256] in [0, 1]
    :param out: Output pixels [N, C]
    """
    N = pixels.shape[0]
    C = pixels.shape[1]
    for i in prange(N):
        out[i, 0] = _to_u8(lut_r[pixels[i, 0]])
        out[i, 1] = _to_u8(lut_g[pixels[i, 1]])
        out[i, 2] = _to_u8(lut_b[pixels[i, 2]])
        for c in range(3, C):
            out[i, c] = pixels[i, c]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_table_numba(
    pixels: NDArray[np.uint8],
    table_r: NDArray[np.uint8],
    table_g: NDArray[np.uint8],
    table_b: NDArray[np.uint8],
    out: NDArray[np.uint8],
) -> None:
    """Apply per-channel 8-bit tables.

    :param pixels: Input pixels [N, C] with C >= 3
    :param table_r: Red table [256]
    :param table_g: Green table [256]
    :param table_b: Blue table [256]
    :param out: Output pixels [N, C]
    """
    N = pixels.shape[0]
    C = pixels.shape[1]
    for i in prange(N):
        out[i, 0] = table_r[pixels[i, 0]]
        out[i, 1] = table_g[pixels[i, 1]]
        out[i, 2] = table_b[pixels[i, 2]]
        for c in range(3, C):
            out[i, c] = pixels[i, c]


@njit(parallel=True, fastmath=True, cache=True, nogil=True)
def apply_lut3d_numba(
    pixels: NDArray[np.uint8],
    data: NDArray[np.float32],
    size: int,
    out: NDArray[np.uint8],
) -> None:
    """Apply a 3D LUT with trilinear interpolation.

    Grid node (r, g, b) is stored at ``(r + g*size + b*size*size) * 3``.

    :param pixels: Input pixels [N, C] with C >= 3
    :param data: Flat grid [size^3 * 3] in [0, 1]
    :param size: Grid side length
    :param out: Output pixels [N, C]
    """
    N = pixels.shape[0]
    C = pixels.shape[1]
    max_idx = size - 1
    stride_g = size
    stride_b = size * size

    for i in prange(N):
        rs = pixels[i, 0] / 255.0 * max_idx
        gs = pixels[i, 1] / 255.0 * max_idx
        bs = pixels[i, 2] / 255.0 * max_idx

        r0 = int(rs)
        g0 = int(gs)
        b0 = int(bs)
        r1 = min(r0 + 1, max_idx)
        g1 = min(g0 + 1, max_idx)
        b1 = min(b0 + 1, max_idx)
        rt = rs - r0
        gt = gs - g0
        bt = bs - b0

        for ch in range(3):
            c000 = data[(r0 + g0 * stride_g + b0 * stride_b) * 3 + ch]
            c100 = data[(r1 + g0 * stride_g + b0 * stride_b) * 3 + ch]
            c010 = data[(r0 + g1 * stride_g + b0 * stride_b) * 3 + ch]
            c110 = data[(r1 + g1 * stride_g + b0 * stride_b) * 3 + ch]
            c001 = data[(r0 + g0 * stride_g + b1 * stride_b) * 3 + ch]
            c101 = data[(r1 + g0 * stride_g + b1 * stride_b) * 3 + ch]
            c011 = data[(r0 + g1 * stride_g + b1 * stride_b) * 3 + ch]
            c111 = data[(r1 + g1 * stride_g + b1 * stride_b) * 3 + ch]

            # r, then g, then b
            c00 = c000 + (c100 - c000) * rt
            c01 = c001 + (c101 - c001) * rt
            c10 = c010 + (c110 - c010) * rt
            c11 = c011 + (c111 - c011) * rt
            c0 = c00 + (c10 - c00) * gt
            c1 = c01 + (c11 - c01) * gt
            out[i, ch] = _to_u8(c0 + (c1 - c0) * bt)

        for c in range(3, C):
            out[i, c] = pixels[i, c]
