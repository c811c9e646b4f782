"""Bounded sample accumulator between audio capture and inference."""

import threading

import numpy as np


class SampleRingBuffer:
    """Fixed-capacity ring buffer of raw mono samples.

    One writer (the capture callback) pushes chunks; once full, the oldest
    samples are overwritten. One reader copies out the most recent window
    with latest(). All access is serialized by a lock, so a window is always
    a consistent snapshot.
    """

    def __init__(self, capacity: int, dtype: type = np.float64):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self.dtype = dtype
        self._data = np.zeros(capacity, dtype=dtype)
        self._write_idx = 0
        self._count = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return self._count

    def push(self, chunk: np.ndarray) -> None:
        """Append a chunk; the oldest samples beyond capacity are dropped."""
        chunk = np.asarray(chunk, dtype=self.dtype).ravel()
        n = len(chunk)
        if n == 0:
            return
        with self._lock:
            if n >= self.capacity:
                self._data[:] = chunk[-self.capacity :]
                self._write_idx = 0
                self._count = self.capacity
                return
            start = self._write_idx
            end = start + n
            if end <= self.capacity:
                self._data[start:end] = chunk
            else:
                head = self.capacity - start
                self._data[start:] = chunk[:head]
                self._data[: end - self.capacity] = chunk[head:]
            self._write_idx = end % self.capacity
            self._count = min(self._count + n, self.capacity)

    def latest(self, n: int) -> np.ndarray:
        """Copy of the most recent n samples in chronological order."""
        with self._lock:
            if n > self._count:
                raise ValueError(f"Requested {n} samples but only {self._count} are buffered")
            return self._copy_latest(n)

    def _copy_latest(self, n: int) -> np.ndarray:
        # Caller holds the lock.
        if n <= 0:
            return np.zeros(0, dtype=self.dtype)
        start = (self._write_idx - n) % self.capacity
        if start + n <= self.capacity:
            return self._data[start : start + n].copy()
        head = self.capacity - start
        return np.concatenate((self._data[start:], self._data[: n - head]))

    def missing(self, n: int) -> int:
        """How many more samples are needed before latest(n) can succeed."""
        with self._lock:
            return max(0, n - self._count)

    def get_all(self) -> np.ndarray:
        """Return all buffered data in chronological order."""
        with self._lock:
            return self._copy_latest(self._count)

    def clear(self) -> None:
        """Reset buffer."""
        with self._lock:
            self._write_idx = 0
            self._count = 0
