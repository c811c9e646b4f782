"""Mono 22.05 kHz audio capture and WAV loading for emotion recognition."""

import logging
import queue
from math import gcd
from typing import Iterator, Optional, Sequence, Union

import numpy as np

try:
    import sounddevice as sd
except ImportError:
    sd = None  # type: ignore

from voice_emotion.audio.config import AudioConfig

logger = logging.getLogger(__name__)

AudioPayload = Union[np.ndarray, Sequence[float]]


def to_mono(payload: AudioPayload) -> np.ndarray:
    """Convert a capture payload to mono float64 samples in [-1, 1].

    Accepts float32/float64 arrays, int16 PCM and plain lists of numbers.
    2-D (frames, channels) input is averaged across channels.
    """
    audio = np.asarray(payload)
    if audio.dtype == np.int16:
        audio = audio.astype(np.float64) / 32768.0
    else:
        audio = audio.astype(np.float64)
    if audio.ndim == 2:
        audio = audio.mean(axis=1)
    elif audio.ndim > 2:
        raise ValueError(f"Unsupported audio payload shape {audio.shape}")
    return audio.ravel()


class AudioCollector:
    """Records audio as mono 22.05 kHz PCM in streaming or batch mode."""

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()

    def record_chunk(
        self,
        duration_sec: float,
        device: Optional[int] = None,
    ) -> np.ndarray:
        """Record a single chunk of audio.

        Args:
            duration_sec: Recording duration in seconds.
            device: Input device index (None = default).

        Returns:
            Mono float32 array, shape (n_samples,), normalized [-1, 1].
        """
        if sd is None:
            raise ImportError("sounddevice is required for recording. pip install sounddevice")

        samples = int(duration_sec * self.config.sample_rate)
        rec = sd.rec(
            samples,
            samplerate=self.config.sample_rate,
            channels=self.config.channels,
            dtype=self.config.dtype,
            device=device,
        )
        sd.wait()
        return rec.squeeze()

    def record_stream(
        self,
        chunk_duration_sec: Optional[float] = None,
        device: Optional[int] = None,
    ) -> Iterator[np.ndarray]:
        """Stream audio chunks continuously.

        Args:
            chunk_duration_sec: Duration of each yielded chunk in seconds
                (default: config.capture_block_size samples).
            device: Input device index (None = default).

        Yields:
            Mono float64 chunks, shape (n_samples,).
        """
        if sd is None:
            raise ImportError("sounddevice is required for recording. pip install sounddevice")

        if chunk_duration_sec is None:
            block_size = self.config.capture_block_size
        else:
            block_size = int(chunk_duration_sec * self.config.sample_rate)
        q: "queue.Queue[np.ndarray]" = queue.Queue()

        def callback(indata: np.ndarray, _frames: int, _time: object, status: object) -> None:
            if status:
                logger.warning("Audio capture status: %s", status)
            q.put(to_mono(indata.copy()))

        with sd.InputStream(
            samplerate=self.config.sample_rate,
            channels=self.config.channels,
            dtype=self.config.dtype,
            blocksize=block_size,
            device=device,
            callback=callback,
        ):
            while True:
                yield q.get()

    def record_to_file(
        self,
        filepath: str,
        duration_sec: float,
        device: Optional[int] = None,
    ) -> None:
        """Record audio and save as mono WAV at the configured rate.

        Args:
            filepath: Output path (e.g. .wav).
            duration_sec: Recording duration in seconds.
            device: Input device index (None = default).
        """
        import scipy.io.wavfile as wavfile

        audio = self.record_chunk(duration_sec, device=device)
        wavfile.write(
            filepath,
            self.config.sample_rate,
            (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16),
        )

    def load_wav(self, filepath: str) -> np.ndarray:
        """Load a WAV file as mono float64 samples at the configured rate."""
        import scipy.io.wavfile as wavfile
        from scipy.signal import resample_poly

        sr, audio = wavfile.read(str(filepath))
        if audio.dtype == np.int32:
            audio = audio.astype(np.float64) / 2147483648.0
        elif audio.dtype == np.uint8:
            audio = (audio.astype(np.float64) - 128.0) / 128.0
        audio = to_mono(audio)
        if sr != self.config.sample_rate:
            logger.info("Resampling %s from %d Hz to %d Hz", filepath, sr, self.config.sample_rate)
            g = gcd(sr, self.config.sample_rate)
            audio = resample_poly(audio, self.config.sample_rate // g, sr // g)
        return audio
