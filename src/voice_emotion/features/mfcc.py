"""MFCC extraction: pre-emphasis, Hamming-windowed frames, FFT power, log-mel, DCT.

The numeric conventions here reproduce the preprocessing the emotion model
was trained with, so keep them exact:
- power at bin k is (re^2 + im^2) / n_fft
- mel energies <= 1e-10 map to the log sentinel -10.0 instead of log(0)
- the DCT-II is unscaled
- fewer samples than one frame yields a single all-zero column
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from voice_emotion.audio.config import AudioConfig
from voice_emotion.features.dct import dct_ii
from voice_emotion.features.fft import fft
from voice_emotion.features.filterbank import cached_mel_filterbank
from voice_emotion.features.shape import pad_or_truncate, to_model_input

logger = logging.getLogger(__name__)

PRE_EMPHASIS = 0.97
LOG_FLOOR = 1e-10
LOG_SENTINEL = -10.0


def pre_emphasis(samples: np.ndarray, coef: float = PRE_EMPHASIS) -> np.ndarray:
    """y[0] = x[0]; y[i] = x[i] - coef * x[i - 1]."""
    x = np.asarray(samples, dtype=np.float64)
    if x.size == 0:
        return x.copy()
    return np.concatenate((x[:1], x[1:] - coef * x[:-1]))


def frame_count(n_samples: int, frame_length: int, hop_length: int) -> int:
    """Number of full frames at stride hop_length; 0 if not even one fits."""
    if n_samples < frame_length:
        return 0
    return (n_samples - frame_length) // hop_length + 1


def frame_signal(signal: np.ndarray, frame_length: int, hop_length: int) -> np.ndarray:
    """Slice a 1-D signal into frames, shape (n_frames, frame_length)."""
    n_frames = frame_count(len(signal), frame_length, hop_length)
    if n_frames == 0:
        return np.zeros((0, frame_length))
    idx = np.arange(frame_length)[np.newaxis, :] + hop_length * np.arange(n_frames)[:, np.newaxis]
    return signal[idx]


def hamming_window(frame_length: int) -> np.ndarray:
    """0.54 - 0.46 * cos(2 * pi * i / (frame_length - 1))."""
    if frame_length == 1:
        return np.ones(1)
    i = np.arange(frame_length)
    return 0.54 - 0.46 * np.cos(2.0 * np.pi * i / (frame_length - 1))


def power_spectrum(frames: np.ndarray, n_fft: int) -> np.ndarray:
    """Normalized one-sided power spectrum of each frame, shape (..., n_fft // 2 + 1)."""
    spectrum = fft(frames)[..., : n_fft // 2 + 1]
    return (spectrum.real ** 2 + spectrum.imag ** 2) / n_fft


def log_mel_energies(power: np.ndarray, filterbank: np.ndarray) -> np.ndarray:
    """Project power spectra onto the filterbank and take the log with a -10.0 floor sentinel."""
    if power.shape[-1] != filterbank.shape[1]:
        raise ValueError(
            f"Filterbank has {filterbank.shape[1]} frequency bins but the power "
            f"spectrum has {power.shape[-1]}"
        )
    sums = power @ filterbank.T
    return np.where(sums > LOG_FLOOR, np.log(np.maximum(sums, LOG_FLOOR)), LOG_SENTINEL)


def compute_mfcc(
    samples: np.ndarray,
    sample_rate: int,
    n_fft: int,
    hop_length: int,
    n_mfcc: int,
    filterbank: Optional[np.ndarray] = None,
    pre_emphasis_coef: float = PRE_EMPHASIS,
) -> np.ndarray:
    """Compute MFCCs of one sample window.

    Args:
        samples: Mono samples, shape (n_samples,).
        sample_rate: Sampling rate in Hz.
        n_fft: Frame length and FFT size.
        hop_length: Stride between frame starts.
        n_mfcc: Number of coefficients (and mel bands).
        filterbank: Optional prebuilt (n_mfcc, n_fft // 2 + 1) filterbank;
            the shared cached one is used when omitted.
        pre_emphasis_coef: Pre-emphasis filter coefficient.

    Returns:
        float64 array, shape (n_mfcc, n_frames); shape (n_mfcc, 1) of zeros
        when the window is shorter than one frame.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim != 1:
        raise ValueError(f"Expected mono samples of shape (n,), got {samples.shape}")

    emphasized = pre_emphasis(samples, pre_emphasis_coef)
    frames = frame_signal(emphasized, n_fft, hop_length)
    if frames.shape[0] == 0:
        logger.debug("Window of %d samples is shorter than one frame (%d)", len(samples), n_fft)
        return np.zeros((n_mfcc, 1))

    if filterbank is None:
        filterbank = cached_mel_filterbank(n_mfcc, n_fft, sample_rate)

    power = power_spectrum(frames * hamming_window(n_fft), n_fft)
    mel = log_mel_energies(power, filterbank)
    coeffs = dct_ii(mel, n_mfcc)  # (n_frames, n_mfcc)
    return np.ascontiguousarray(coeffs.T)


class MfccExtractor:
    """Extract fixed-shape MFCC matrices for the emotion classifier."""

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()
        self._mel_filters = cached_mel_filterbank(
            self.config.n_mfcc,
            self.config.fft_size,
            float(self.config.sample_rate),
        )

    @property
    def mel_filters(self) -> np.ndarray:
        """Shared read-only filterbank, shape (n_mfcc, n_fft_bins)."""
        return self._mel_filters

    def compute(self, audio: np.ndarray) -> np.ndarray:
        """Variable-length MFCCs, shape (n_mfcc, n_frames)."""
        return compute_mfcc(
            audio,
            self.config.sample_rate,
            self.config.fft_size,
            self.config.hop_length,
            self.config.n_mfcc,
            filterbank=self._mel_filters,
            pre_emphasis_coef=self.config.pre_emphasis,
        )

    def extract(self, audio: np.ndarray) -> np.ndarray:
        """Fixed-shape MFCCs, shape (n_mfcc, target_frames)."""
        return pad_or_truncate(self.compute(audio), self.config.target_frames)

    def extract_model_input(self, audio: np.ndarray) -> np.ndarray:
        """Fixed-shape MFCCs as a float32 (1, n_mfcc, target_frames) tensor."""
        return to_model_input(self.extract(audio))
