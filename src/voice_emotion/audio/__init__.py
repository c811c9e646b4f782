"""Audio capture, buffering and configuration."""

from voice_emotion.audio.buffer import SampleRingBuffer
from voice_emotion.audio.collector import AudioCollector, to_mono
from voice_emotion.audio.config import AudioConfig

__all__ = [
    "AudioConfig",
    "AudioCollector",
    "SampleRingBuffer",
    "to_mono",
]
