"""Height and threshold filtering of candidate peaks."""

from __future__ import annotations

import logging
import warnings

import numpy as np

from peakscan.core.types import PeakHeightWarning

logger = logging.getLogger(__name__)


def remove_small_peaks(
    y: np.ndarray,
    candidates: np.ndarray,
    *,
    min_height: float = -np.inf,
    threshold: float = 0.0,
    warn_if_empty: bool = True,
) -> np.ndarray:
    """Keep candidates above ``min_height`` that clear both neighbours by ``threshold``.

    Neighbours are the adjacent samples of the raw signal, so a plateau only
    survives a zero threshold. Candidates are never at the signal ends.
    """
    arr = np.asarray(y, dtype=float)
    idx = np.asarray(candidates, dtype=np.intp).ravel()
    if idx.size == 0:
        return idx

    tall = idx[arr[idx] > min_height]
    if tall.size == 0 and warn_if_empty:
        warnings.warn(
            f"min_peak_height={min_height} removed all {idx.size} candidate peaks; "
            "returning an empty result.",
            PeakHeightWarning,
            stacklevel=2,
        )

    neighbour = np.maximum(arr[tall - 1], arr[tall + 1])
    kept = tall[arr[tall] - neighbour >= threshold]
    logger.debug(
        "Height/threshold filter kept %d of %d candidates", kept.size, idx.size
    )
    return kept
