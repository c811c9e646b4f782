"""Iterative radix-2 Cooley-Tukey FFT.

Decimation in time: bit-reversal permutation of the input, then log2(N)
butterfly stages. Each stage's twiddle factors are accumulated by repeated
complex multiplication with e^{-2*pi*i/len}. Butterflies of one stage are
applied to all groups (and all rows of a batch) at once with numpy.

No normalization is applied; callers scale the result themselves.
"""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np


def multiply_complex(a: complex, b: complex) -> complex:
    """Product of two complex numbers in rectangular form."""
    return complex(
        a.real * b.real - a.imag * b.imag,
        a.real * b.imag + a.imag * b.real,
    )


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    size = 1
    while size < n:
        size <<= 1
    return size


@lru_cache(maxsize=16)
def bit_reverse_permutation(n: int) -> np.ndarray:
    """Index permutation that puts a length-n (power of two) array in bit-reversed order."""
    perm = np.arange(n)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j ^= bit
        if i < j:
            perm[i], perm[j] = perm[j], perm[i]
    perm.flags.writeable = False
    return perm


@lru_cache(maxsize=64)
def _stage_twiddles(length: int) -> np.ndarray:
    """Twiddles w^k, k < length/2, for one butterfly stage of size `length`."""
    half = length // 2
    ang = -2.0 * math.pi / length
    w_len = complex(math.cos(ang), math.sin(ang))
    twiddles = np.empty(half, dtype=np.complex128)
    w = complex(1.0, 0.0)
    for k in range(half):
        twiddles[k] = w
        w = multiply_complex(w, w_len)
    twiddles.flags.writeable = False
    return twiddles


def fft(x: np.ndarray) -> np.ndarray:
    """Compute the unnormalized DFT of x along its last axis.

    Args:
        x: Real or complex samples, shape (n,) or (batch, n).

    Returns:
        complex128 array of shape (..., size) where size is the smallest
        power of two >= n. The input is zero-padded on the right when
        n is not a power of two. An empty input yields an empty result.
    """
    x = np.asarray(x)
    n = x.shape[-1]
    if n == 0:
        return np.zeros(x.shape, dtype=np.complex128)

    size = next_power_of_two(n)
    if size != n:
        pad_width = [(0, 0)] * (x.ndim - 1) + [(0, size - n)]
        x = np.pad(x, pad_width, mode="constant", constant_values=0)

    lead = x.shape[:-1]
    buf = x.astype(np.complex128)[..., bit_reverse_permutation(size)]
    buf = buf.reshape(-1, size)

    length = 2
    while length <= size:
        half = length // 2
        groups = buf.reshape(buf.shape[0], size // length, length)
        u = groups[..., :half].copy()
        v = groups[..., half:] * _stage_twiddles(length)
        groups[..., :half] = u + v
        groups[..., half:] = u - v
        length <<= 1

    return buf.reshape(lead + (size,))
