"""Speech emotion recognition front end - capture, MFCC features, streaming inference."""

from voice_emotion.features import MfccExtractor, compute_mfcc, pad_or_truncate

__all__ = ["MfccExtractor", "compute_mfcc", "pad_or_truncate"]
