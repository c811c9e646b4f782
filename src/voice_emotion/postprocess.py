"""Post-processing for classifier output (labels, top-k, display text)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np


def default_labels(num_classes: int = 26) -> List[str]:
    """Placeholder labels 'Class 0' .. 'Class n-1'; replace with the model's real mapping."""
    return [f"Class {i}" for i in range(num_classes)]


def label_for(index: int, labels: Optional[Sequence[str]] = None) -> str:
    """Label for a class index, falling back to 'Class i' when unmapped."""
    if labels is not None and 0 <= index < len(labels):
        return labels[index]
    return f"Class {index}"


def flatten_probabilities(output: np.ndarray) -> np.ndarray:
    """Accept (C,) or (1, C) model output and return a (C,) float64 vector."""
    probs = np.asarray(output, dtype=np.float64)
    if probs.ndim == 2 and probs.shape[0] == 1:
        probs = probs[0]
    if probs.ndim != 1 or probs.size == 0:
        raise ValueError(f"Expected (C,) or (1, C) probabilities, got shape {np.shape(output)}")
    return probs


@dataclass(frozen=True, eq=False)
class EmotionPrediction:
    """One classification result over a fixed MFCC window."""

    probabilities: np.ndarray
    labels: Tuple[str, ...] = ()

    @classmethod
    def from_output(
        cls,
        output: np.ndarray,
        labels: Optional[Sequence[str]] = None,
    ) -> "EmotionPrediction":
        return cls(flatten_probabilities(output), tuple(labels or ()))

    @property
    def top_index(self) -> int:
        # First maximum wins on ties
        return int(np.argmax(self.probabilities))

    @property
    def top_label(self) -> str:
        return label_for(self.top_index, self.labels)

    @property
    def top_confidence(self) -> float:
        return float(self.probabilities[self.top_index])

    def top_k(self, k: int = 6) -> List[Tuple[str, float]]:
        """The k most probable (label, probability) pairs, highest first."""
        order = np.argsort(-self.probabilities, kind="stable")[:k]
        return [(label_for(int(i), self.labels), float(self.probabilities[i])) for i in order]


def format_prediction(prediction: EmotionPrediction, k: int = 6) -> str:
    """Multi-line display text: top label with confidence, then the top-k table."""
    lines = [f"{prediction.top_label.upper()} ({prediction.top_confidence * 100:.1f}% confidence)"]
    for label, prob in prediction.top_k(k):
        lines.append(f"  {label:<20} {prob * 100:5.1f}%")
    return "\n".join(lines)
