"""Model loaders for emotion classification (TorchScript)."""

from voice_emotion.models.torchscript_model import load_torchscript_model

__all__ = ["load_torchscript_model"]
