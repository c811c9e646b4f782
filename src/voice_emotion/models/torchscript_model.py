"""TorchScript emotion classifier loader for the streaming pipeline.

The model takes the fixed MFCC tensor (1, n_mfcc, target_frames) float32 and
returns class probabilities (1, num_classes).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np

from voice_emotion.audio.config import AudioConfig

logger = logging.getLogger(__name__)


def load_torchscript_model(
    path: str | Path,
    config: Optional[AudioConfig] = None,
    device: Optional[str] = None,
) -> Tuple[Callable[[np.ndarray], np.ndarray], int]:
    """Load a TorchScript classifier and return a forward callable plus class count.

    Args:
        path: Path to a TorchScript (.pt) file.
        config: Audio configuration defining the input shape.
        device: Optional device string ('cuda', 'cpu', etc.). If None,
                uses CUDA if available else CPU.

    Returns:
        (model_forward, num_classes):
        - model_forward(features: np.ndarray) -> probabilities: np.ndarray
          features shape (1, n_mfcc, target_frames) float32
          probabilities shape (num_classes,)
        - num_classes: size of the model output
    """
    import torch

    config = config or AudioConfig()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model not found: {path}")

    if device is None:
        device = "cuda" if torch.cuda.is_available() else "cpu"

    model = torch.jit.load(str(path), map_location=torch.device(device))
    model.eval()

    def forward(features: np.ndarray) -> np.ndarray:
        if features.shape != config.model_input_shape:
            raise ValueError(
                f"Model expects input shape {config.model_input_shape}, got {features.shape}"
            )
        with torch.no_grad():
            x = torch.from_numpy(np.ascontiguousarray(features, dtype=np.float32)).to(device)
            out = model(x)
            return out.reshape(-1).cpu().numpy().astype(np.float64)

    dummy = np.zeros(config.model_input_shape, dtype=np.float32)
    num_classes = int(forward(dummy).shape[0])
    logger.debug("Model input shape: %s", config.model_input_shape)
    logger.debug("Model output shape: (1, %d)", num_classes)
    return forward, num_classes
