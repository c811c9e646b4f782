"""Unit tests for the sample ring buffer."""

from __future__ import annotations

import threading
import unittest

import numpy as np

from voice_emotion.audio.buffer import SampleRingBuffer


class TestSampleRingBuffer(unittest.TestCase):
    """Tests for SampleRingBuffer."""

    def test_invalid_capacity(self) -> None:
        with self.assertRaises(ValueError):
            SampleRingBuffer(0)

    def test_push_and_latest(self) -> None:
        ring = SampleRingBuffer(10)
        ring.push(np.arange(4))
        ring.push(np.arange(4, 7))
        self.assertEqual(len(ring), 7)
        self.assertEqual(ring.latest(3).tolist(), [4, 5, 6])
        self.assertEqual(ring.get_all().tolist(), list(range(7)))

    def test_oldest_samples_dropped(self) -> None:
        ring = SampleRingBuffer(5)
        for start in range(0, 12, 3):
            ring.push(np.arange(start, start + 3))
        self.assertEqual(len(ring), 5)
        self.assertEqual(ring.get_all().tolist(), [7, 8, 9, 10, 11])
        self.assertEqual(ring.latest(4).tolist(), [8, 9, 10, 11])

    def test_chunk_larger_than_capacity(self) -> None:
        ring = SampleRingBuffer(4)
        ring.push(np.arange(10))
        self.assertEqual(ring.get_all().tolist(), [6, 7, 8, 9])

    def test_latest_is_a_copy(self) -> None:
        ring = SampleRingBuffer(4)
        ring.push(np.ones(4))
        window = ring.latest(4)
        window[:] = 0
        self.assertEqual(ring.latest(4).tolist(), [1, 1, 1, 1])

    def test_latest_requires_enough_samples(self) -> None:
        ring = SampleRingBuffer(8)
        ring.push(np.ones(3))
        self.assertEqual(ring.missing(5), 2)
        self.assertEqual(ring.missing(3), 0)
        with self.assertRaises(ValueError):
            ring.latest(5)

    def test_empty_chunk_ignored(self) -> None:
        ring = SampleRingBuffer(4)
        ring.push(np.zeros(0))
        self.assertEqual(len(ring), 0)
        self.assertEqual(ring.get_all().shape, (0,))

    def test_clear(self) -> None:
        ring = SampleRingBuffer(4)
        ring.push(np.ones(3))
        ring.clear()
        self.assertEqual(len(ring), 0)
        self.assertEqual(ring.missing(4), 4)

    def test_concurrent_writer_and_reader(self) -> None:
        """Windows read while a writer appends are always contiguous runs."""
        ring = SampleRingBuffer(1000)
        total = 50_000
        errors = []

        def writer() -> None:
            for start in range(0, total, 37):
                ring.push(np.arange(start, min(start + 37, total), dtype=np.float64))

        thread = threading.Thread(target=writer)
        thread.start()
        while thread.is_alive():
            if ring.missing(200) == 0:
                window = ring.latest(200)
                if not np.all(np.diff(window) == 1):
                    errors.append(window)
        thread.join()
        self.assertEqual(errors, [])
        self.assertEqual(ring.latest(3).tolist(), [total - 3, total - 2, total - 1])

    def test_get_all_while_clearing(self) -> None:
        """get_all() returns a consistent snapshot even if another thread clears."""
        ring = SampleRingBuffer(64)
        errors = []
        done = threading.Event()

        def churn() -> None:
            for _ in range(20_000):
                ring.push(np.arange(16, dtype=np.float64))
                ring.clear()
            done.set()

        thread = threading.Thread(target=churn)
        thread.start()
        while not done.is_set():
            try:
                snapshot = ring.get_all()
            except ValueError as exc:
                errors.append(exc)
                break
            if snapshot.size not in (0, 16):
                errors.append(snapshot)
        thread.join()
        self.assertEqual(errors, [])
        self.assertEqual(ring.get_all().shape, (0,))


if __name__ == "__main__":
    unittest.main(verbosity=2)
