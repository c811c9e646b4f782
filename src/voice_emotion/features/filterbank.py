"""Triangular mel filterbank on the HTK mel scale."""

from __future__ import annotations

import threading
from typing import Dict, Tuple

import numpy as np


def hz_to_mel(hz):
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    return 700.0 * (10.0 ** (np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


def mel_filterbank(n_mels: int, n_fft: int, sample_rate: float) -> np.ndarray:
    """Build the mel filterbank matrix.

    Mel points are spaced evenly between 0 Hz and Nyquist, mapped back to Hz
    and then to FFT bins with floor((n_fft + 1) * hz / sample_rate). Filter m
    rises from bins[m] to bins[m + 1] and falls to bins[m + 2]; slopes use a
    denominator of at least 1 so coincident bins do not divide by zero.
    Bins outside [0, n_fft // 2 + 1) are skipped.

    Returns:
        float64 array, shape (n_mels, n_fft // 2 + 1).
    """
    n_bins = n_fft // 2 + 1
    mel_points = np.linspace(
        hz_to_mel(0.0),
        hz_to_mel(sample_rate / 2.0),
        n_mels + 2,
    )
    hz_points = mel_to_hz(mel_points)
    bin_points = np.floor((n_fft + 1) * hz_points / sample_rate).astype(int)

    filters = np.zeros((n_mels, n_bins))
    for i in range(n_mels):
        left, center, right = bin_points[i], bin_points[i + 1], bin_points[i + 2]
        rise = max(1, center - left)
        fall = max(1, right - center)
        for k in range(max(left, 0), min(center, n_bins)):
            filters[i, k] = (k - left) / rise
        for k in range(max(center, 0), min(right, n_bins)):
            filters[i, k] = (right - k) / fall
    return filters


_cache: Dict[Tuple[int, int, float], np.ndarray] = {}
_cache_lock = threading.Lock()


def cached_mel_filterbank(n_mels: int, n_fft: int, sample_rate: float) -> np.ndarray:
    """Return the shared, read-only filterbank for these parameters.

    Built at most once per parameter tuple; safe to call from several threads.
    """
    key = (int(n_mels), int(n_fft), float(sample_rate))
    with _cache_lock:
        filters = _cache.get(key)
        if filters is None:
            filters = mel_filterbank(*key)
            filters.flags.writeable = False
            _cache[key] = filters
    return filters
