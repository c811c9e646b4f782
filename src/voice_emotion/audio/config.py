"""Centralized audio and MFCC feature configuration.

Encoding standards (must match the classifier's training preprocessing):
- Audio: mono 22.05 kHz
- Features: 40 MFCCs from a 40-band HTK mel filterbank
- STFT: 512-sample frames (FFT 512), 256-sample hop, Hamming window
- Model input: fixed 40 x 174 matrix (pad/truncate along time)
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class AudioConfig:
    """Audio recording and MFCC encoding configuration."""

    # Recording
    sample_rate: int = 22_050
    channels: int = 1  # mono
    dtype: str = "float32"
    capture_block_size: int = 3000

    # STFT
    fft_size: int = 512
    hop_length: int = 256
    pre_emphasis: float = 0.97

    # MFCC (also the number of mel bands)
    n_mfcc: int = 40

    # Model input
    target_frames: int = 174
    num_classes: int = 26

    def __post_init__(self) -> None:
        for name in ("sample_rate", "fft_size", "hop_length", "n_mfcc", "target_frames"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.fft_size & (self.fft_size - 1):
            raise ValueError(f"fft_size must be a power of two, got {self.fft_size}")

    @property
    def frame_length(self) -> int:
        """Analysis frame length in samples (one FFT per frame)."""
        return self.fft_size

    @property
    def n_fft_bins(self) -> int:
        """Number of non-negative frequency bins of a real FFT."""
        return self.fft_size // 2 + 1

    @property
    def required_samples(self) -> int:
        """Samples needed to produce exactly target_frames frames."""
        return self.hop_length * (self.target_frames - 1) + self.frame_length

    @property
    def ring_capacity(self) -> int:
        """Upper bound on buffered raw samples (twice one inference window)."""
        return 2 * self.required_samples

    @property
    def model_input_shape(self) -> Tuple[int, int, int]:
        """Tensor shape expected by the classifier: (1, n_mfcc, target_frames)."""
        return (1, self.n_mfcc, self.target_frames)
