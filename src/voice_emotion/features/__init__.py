"""MFCC feature extraction: FFT, mel filterbank, DCT, framing and shape normalization."""

from voice_emotion.features.dct import dct_ii
from voice_emotion.features.fft import fft, multiply_complex, next_power_of_two
from voice_emotion.features.filterbank import cached_mel_filterbank, mel_filterbank
from voice_emotion.features.mfcc import MfccExtractor, compute_mfcc
from voice_emotion.features.shape import pad_or_truncate, to_model_input

__all__ = [
    "MfccExtractor",
    "cached_mel_filterbank",
    "compute_mfcc",
    "dct_ii",
    "fft",
    "mel_filterbank",
    "multiply_complex",
    "next_power_of_two",
    "pad_or_truncate",
    "to_model_input",
]
