"""Numba-optimized luminance histogram kernels."""

from __future__ import annotations

import numpy as np
from numba import njit
from numpy.typing import NDArray


# Not using parallel=True because histogram accumulation has race conditions
@njit(fastmath=True, cache=True, nogil=True)
def histogram_256_numba(values: NDArray[np.float64], out: NDArray[np.int64]) -> None:
    """Bucket values in [0, 1] into 256 bins by rounding.

    Bin index is ``round(clamp(v) * 255)``; out-of-range values land in
    the end bins.

    :param values: Input values [N]
    :param out: Output histogram [256], accumulated in place
    """
    N = values.shape[0]
    for i in range(N):
        v = values[i]
        if v < 0.0:
            v = 0.0
        elif v > 1.0:
            v = 1.0
        out[int(v * 255.0 + 0.5)] += 1


@njit(fastmath=True, cache=True, nogil=True)
def cumulative_fraction_numba(hist: NDArray[np.int64], total: float, out: NDArray[np.float32]) -> None:
    """Running sum of ``hist`` divided by ``total``.

    :param hist: Histogram [256]
    :param total: Normaliser (pixel count), must be > 0
    :param out: Output CDF [256]
    """
    cumulative = 0
    for i in range(hist.shape[0]):
        cumulative += hist[i]
        out[i] = cumulative / total
