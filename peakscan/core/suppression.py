"""Greedy minimum-distance suppression and final peak ordering."""

from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

_EPS = float(np.finfo(float).eps)


def order_peaks(values: np.ndarray, idx: np.ndarray, sort_order: str = "none") -> np.ndarray:
    """Reorder ``idx`` (positions into ``values``) by value; ties keep their order."""
    out = np.asarray(idx, dtype=np.intp)
    if out.size == 0 or sort_order == "none":
        return out
    vals = np.asarray(values, dtype=float)[out]
    if sort_order == "ascend":
        return out[np.argsort(vals, kind="stable")]
    if sort_order == "descend":
        return out[np.argsort(-vals, kind="stable")]
    raise ValueError(f"Unsupported sort_order {sort_order!r}.")


def select_by_distance(
    values: np.ndarray,
    locations: np.ndarray,
    min_distance: float = 0.0,
    sort_order: str = "none",
) -> np.ndarray:
    """Keep the tallest peaks that are more than ``min_distance`` apart.

    ``values`` and ``locations`` describe the candidate peaks in occurrence
    order. Peaks are visited tallest first (earlier occurrence wins ties) and
    every remaining peak within ``[loc - d, loc + d]`` of a kept one is
    discarded.

    Returns:
        Positions into ``values`` of the kept peaks, in ``sort_order``:
        ``none`` is occurrence order, ``descend`` the tallest-first visiting
        order, ``ascend`` the reverse ranking by value.
    """
    vals = np.asarray(values, dtype=float).ravel()
    locs = np.asarray(locations, dtype=float).ravel()
    if vals.size != locs.size:
        raise ValueError("values and locations must have the same length.")

    n = int(vals.size)
    if n == 0 or min_distance == 0:
        return order_peaks(vals, np.arange(n, dtype=np.intp), sort_order)

    ranked = np.argsort(-vals, kind="stable")
    ranked_locs = locs[ranked]
    removed = np.zeros(n, dtype=bool)
    for i in range(n):
        if removed[i]:
            continue
        lo = ranked_locs[i] - min_distance
        hi = ranked_locs[i] + min_distance
        removed |= (ranked_locs - lo > -_EPS) & (ranked_locs - hi < _EPS)
        removed[i] = False

    kept = ranked[~removed]
    logger.debug(
        "Distance suppression (d=%g) kept %d of %d peaks", min_distance, kept.size, n
    )
    if sort_order == "descend":
        return kept
    if sort_order == "none":
        return np.sort(kept)
    return order_peaks(vals, kept, sort_order)
