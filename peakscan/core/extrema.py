"""Single-pass scan for local maxima, infinite samples and inflection points."""

from __future__ import annotations

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

_NEITHER = 0
_INCREASING = 1
_DECREASING = -1


def find_local_extrema(y: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Scan ``y`` once and classify its turning points.

    The signal is treated as bounded by non-values on both ends. Runs of equal
    samples collapse to their first index, and NaN/+Inf samples are both
    treated as non-values (a run of them is one border).

    Returns:
        ``(finite_peaks, infinite_peaks, inflections)`` as sorted int arrays.
        ``finite_peaks`` are runs where the direction turns from rising to
        falling; ``infinite_peaks`` are every +Inf sample; ``inflections``
        mark direction changes, the edges of non-finite runs and the last
        finite sample.
    """
    arr = np.asarray(y, dtype=float)
    n = int(arr.size)

    peaks = np.empty(n, dtype=np.intp)
    infinite = np.empty(n, dtype=np.intp)
    inflections = np.empty(n, dtype=np.intp)
    n_pk = n_inf = n_inflect = 0

    direction = _NEITHER
    # index -1 holds an artificial non-value that is never reported
    k_first = -1
    y_first = math.inf
    first_is_border = True

    for k, value in enumerate(arr.tolist()):
        if math.isnan(value):
            value = math.inf
            is_border = True
        elif value == math.inf:
            is_border = True
            infinite[n_inf] = k
            n_inf += 1
        else:
            is_border = False

        if value == y_first:
            continue

        previous = direction
        if is_border or first_is_border:
            direction = _NEITHER
            if k_first >= 0:
                inflections[n_inflect] = k_first
                n_inflect += 1
        elif value < y_first:
            direction = _DECREASING
            if previous != _DECREASING:
                inflections[n_inflect] = k_first
                n_inflect += 1
                if previous == _INCREASING:
                    peaks[n_pk] = k_first
                    n_pk += 1
        else:
            direction = _INCREASING
            if previous != _INCREASING:
                inflections[n_inflect] = k_first
                n_inflect += 1

        y_first = value
        k_first = k
        first_is_border = is_border

    if n > 0 and not first_is_border and (n_inflect == 0 or inflections[n_inflect - 1] < n - 1):
        inflections[n_inflect] = n - 1
        n_inflect += 1

    logger.debug(
        "Scanned %d samples: %d finite peaks, %d infinite peaks, %d inflections",
        n,
        n_pk,
        n_inf,
        n_inflect,
    )
    return peaks[:n_pk].copy(), infinite[:n_inf].copy(), inflections[:n_inflect].copy()


def combine_peaks(finite_peaks: np.ndarray, infinite_peaks: np.ndarray) -> np.ndarray:
    """Sorted union of finite and infinite peak indices."""
    return np.union1d(
        np.asarray(finite_peaks, dtype=np.intp),
        np.asarray(infinite_peaks, dtype=np.intp),
    ).astype(np.intp)
