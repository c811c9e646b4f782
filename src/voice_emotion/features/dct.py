"""Unscaled type-II discrete cosine transform."""

from __future__ import annotations

import numpy as np


def dct_ii(x: np.ndarray, count: int) -> np.ndarray:
    """First `count` DCT-II coefficients of x along its last axis.

    result[k] = sum_i x[i] * cos(pi * k * (2i + 1) / (2n)), no orthonormal
    scaling. `count` may exceed n.
    """
    x = np.asarray(x, dtype=np.float64)
    n = x.shape[-1]
    if n == 0:
        return np.zeros(x.shape[:-1] + (count,))
    k = np.arange(count)[:, np.newaxis]
    i = np.arange(n)
    basis = np.cos(np.pi * k * (2 * i + 1) / (2 * n))
    return x @ basis.T
