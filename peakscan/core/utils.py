"""Small pure helpers for validating signals and coordinates."""

from __future__ import annotations

import math

import numpy as np

MIN_SAMPLES = 3


def real_1d(name: str, values: np.ndarray) -> np.ndarray:
    """Return ``values`` as a float 1D copy; NaN and +/-Inf are allowed."""
    if np.iscomplexobj(values):
        raise ValueError(f"{name} must be real-valued.")
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a numeric sequence.") from exc
    if arr.ndim > 1 and sum(d > 1 for d in arr.shape) > 1:
        raise ValueError(f"{name} must be a vector, received shape {arr.shape}.")
    return arr.ravel()


def as_signal(samples: np.ndarray) -> np.ndarray:
    y = real_1d("samples", samples)
    if y.size < MIN_SAMPLES:
        raise ValueError(
            f"samples must contain at least {MIN_SAMPLES} values, got {y.size}."
        )
    return y


def resolve_locations(
    n_samples: int,
    x: np.ndarray | None = None,
    sample_rate: float | None = None,
) -> np.ndarray:
    """Return the x-coordinate of every sample.

    Defaults to the sample index; ``sample_rate`` gives ``index / rate``.
    """
    if x is not None and sample_rate is not None:
        raise ValueError("Pass either x or sample_rate, not both.")

    if sample_rate is not None:
        try:
            fs = float(sample_rate)
        except (TypeError, ValueError) as exc:
            raise ValueError("sample_rate must be a positive real number.") from exc
        if not math.isfinite(fs) or fs <= 0:
            raise ValueError(f"sample_rate must be positive and finite, got {sample_rate!r}.")
        return np.arange(n_samples, dtype=float) / fs

    if x is None:
        return np.arange(n_samples, dtype=float)

    locs = real_1d("x", x)
    if locs.size != n_samples:
        raise ValueError(
            f"x must have the same length as samples ({n_samples}), got {locs.size}."
        )
    if not np.isfinite(locs).all():
        raise ValueError("x contains NaN/inf values.")
    if np.any(np.diff(locs) <= 0):
        raise ValueError("x must be strictly increasing.")
    return locs
