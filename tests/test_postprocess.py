"""Unit tests for classifier post-processing."""

from __future__ import annotations

import unittest

import numpy as np

from voice_emotion.postprocess import (
    EmotionPrediction,
    default_labels,
    flatten_probabilities,
    format_prediction,
    label_for,
)


class TestLabels(unittest.TestCase):
    """Tests for label helpers."""

    def test_default_labels(self) -> None:
        labels = default_labels()
        self.assertEqual(len(labels), 26)
        self.assertEqual(labels[0], "Class 0")
        self.assertEqual(labels[25], "Class 25")

    def test_label_for_fallback(self) -> None:
        labels = ["neutral", "happy"]
        self.assertEqual(label_for(1, labels), "happy")
        self.assertEqual(label_for(5, labels), "Class 5")
        self.assertEqual(label_for(0, None), "Class 0")


class TestEmotionPrediction(unittest.TestCase):
    """Tests for EmotionPrediction."""

    def test_flatten_accepts_batch_of_one(self) -> None:
        probs = flatten_probabilities(np.array([[0.1, 0.9]], dtype=np.float32))
        self.assertEqual(probs.shape, (2,))
        with self.assertRaises(ValueError):
            flatten_probabilities(np.zeros((2, 3)))
        with self.assertRaises(ValueError):
            flatten_probabilities(np.zeros(0))

    def test_top_prediction(self) -> None:
        p = EmotionPrediction.from_output([[0.1, 0.7, 0.2]], ["calm", "angry", "sad"])
        self.assertEqual(p.top_index, 1)
        self.assertEqual(p.top_label, "angry")
        self.assertAlmostEqual(p.top_confidence, 0.7)

    def test_first_maximum_wins(self) -> None:
        p = EmotionPrediction.from_output([0.4, 0.4, 0.2])
        self.assertEqual(p.top_index, 0)

    def test_top_k_sorted(self) -> None:
        probs = np.linspace(0.0, 1.0, 10)
        p = EmotionPrediction.from_output(probs)
        top = p.top_k(6)
        self.assertEqual(len(top), 6)
        self.assertEqual([label for label, _ in top][:2], ["Class 9", "Class 8"])
        values = [v for _, v in top]
        self.assertEqual(values, sorted(values, reverse=True))

    def test_format(self) -> None:
        p = EmotionPrediction.from_output([0.125, 0.875], ["calm", "happy"])
        text = format_prediction(p, k=2)
        self.assertTrue(text.startswith("HAPPY (87.5% confidence)"))
        self.assertIn("calm", text)


if __name__ == "__main__":
    unittest.main(verbosity=2)
