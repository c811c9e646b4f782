"""Fixed-shape normalization of MFCC matrices for the classifier."""

from __future__ import annotations

import numpy as np


def pad_or_truncate(mfcc: np.ndarray, target_frames: int) -> np.ndarray:
    """Pad or truncate the time axis of an (n_mfcc, frames) matrix to target_frames.

    Longer inputs keep their last target_frames columns (most recent context).
    Shorter inputs are left-padded with zero columns so the original data sits
    at the tail. The input is never modified.
    """
    mfcc = np.asarray(mfcc)
    if mfcc.ndim != 2:
        raise ValueError(f"Expected a 2-D (n_mfcc, frames) matrix, got shape {mfcc.shape}")
    n_coeffs, frames = mfcc.shape
    out = np.zeros((n_coeffs, target_frames), dtype=np.float64)
    if frames >= target_frames:
        out[:] = mfcc[:, frames - target_frames :]
    elif frames > 0:
        out[:, target_frames - frames :] = mfcc
    return out


def to_model_input(mfcc: np.ndarray) -> np.ndarray:
    """Wrap a fixed-shape (n_mfcc, target_frames) matrix as a float32 [1, n_mfcc, target_frames] tensor."""
    mfcc = np.asarray(mfcc)
    if mfcc.ndim != 2:
        raise ValueError(f"Expected a 2-D (n_mfcc, frames) matrix, got shape {mfcc.shape}")
    return mfcc.astype(np.float32)[np.newaxis, :, :]
