"""Prominence bases and reference-height widths of candidate peaks.

Bases are found with a monotonic stack swept over the inflection points, once
left-to-right and once on the mirrored signal, so the cost is linear in the
number of inflections rather than in peaks times signal length.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from peakscan.core.types import PeakExtents

logger = logging.getLogger(__name__)


def _left_bases(
    y: np.ndarray,
    peaks: np.ndarray,
    finite_peaks: np.ndarray,
    inflections: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """Lowest points to the left of each peak in ``peaks``.

    ``y`` must hold NaN wherever the signal has a border (NaN or +Inf).

    Returns:
        ``(base, saddle)`` index arrays. ``base`` is the lowest sample between
        the peak and the nearest strictly higher peak or border; ``saddle``
        stops at the nearest peak of equal or greater height instead.
    """
    base = np.zeros(peaks.size, dtype=np.intp)
    saddle = np.zeros(peaks.size, dtype=np.intp)
    if peaks.size == 0:
        return base, saddle

    slot = {int(p): k for k, p in enumerate(peaks.tolist())}
    is_peak = set(finite_peaks.tolist())

    # (peak height, lowest valley back to the previous taller peak, valley index)
    # with peak heights strictly decreasing from bottom to top
    stack: list[tuple[float, float, int]] = []
    valley = math.nan
    i_valley = -1

    for i in inflections.tolist():
        v = float(y[i])
        if i not in is_peak:
            valley = v
            i_valley = i
            if math.isnan(v):
                stack.clear()
            else:
                # a deeper valley makes shallower stored valleys irrelevant
                while stack and stack[-1][1] > v:
                    stack.pop()
            continue

        while stack and stack[-1][0] < v:
            _, lower, i_lower = stack.pop()
            if lower < valley:
                valley, i_valley = lower, i_lower
        i_saddle = i_valley

        # equal peaks do not stop the prominence base
        while stack and stack[-1][0] <= v:
            _, lower, i_lower = stack.pop()
            if lower < valley:
                valley, i_valley = lower, i_lower

        stack.append((v, valley, i_valley))
        k = slot.get(i)
        if k is not None:
            base[k] = i_valley
            saddle[k] = i_saddle

    return base, saddle


def find_peak_bases(
    y: np.ndarray,
    peaks: np.ndarray,
    finite_peaks: np.ndarray,
    inflections: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(base_level, left_saddle, right_saddle)`` for each peak.

    ``base_level`` is the higher of the two minima found scanning outward to
    the nearest strictly higher peak or border on either side.
    """
    arr = np.asarray(y, dtype=float)
    idx = np.asarray(peaks, dtype=np.intp)
    finite = np.asarray(finite_peaks, dtype=np.intp)
    inflect = np.asarray(inflections, dtype=np.intp)
    last = arr.size - 1

    left_base, left_saddle = _left_bases(arr, idx, finite, inflect)
    right_base, right_saddle = _left_bases(
        arr[::-1], last - idx[::-1], last - finite[::-1], last - inflect[::-1]
    )
    right_base = last - right_base[::-1]
    right_saddle = last - right_saddle[::-1]

    levels = np.maximum(arr[left_base], arr[right_base]) if idx.size else np.zeros(0)
    return levels.astype(float), left_saddle, right_saddle


def _interpolate_crossing(
    xa: float, xb: float, ya: float, yb: float, peak: float, base: float
) -> float:
    """x where the segment (xa, ya)-(xb, yb) meets ``(peak + base) / 2``."""
    with np.errstate(invalid="ignore", divide="ignore"):
        xc = xa + (xb - xa) * (0.5 * (peak + base) - ya) / (yb - ya)
    if math.isnan(xc):
        # only reachable through -Inf samples: take the limit
        xc = 0.5 * (xa + xb) if math.isinf(base) else xb
    return float(xc)


def _reference_bounds(
    y: np.ndarray,
    x: np.ndarray,
    peaks: np.ndarray,
    ref_base: np.ndarray,
    left_bound: np.ndarray,
    right_bound: np.ndarray,
) -> np.ndarray:
    out = np.zeros((peaks.size, 2), dtype=float)
    for k, p in enumerate(peaks.tolist()):
        peak = float(y[p])
        base = float(ref_base[k])
        ref = 0.5 * (peak + base)
        lo = int(left_bound[k])
        hi = int(right_bound[k])

        i = p
        while i >= lo and y[i] > ref:
            i -= 1
        if i < lo:
            x_left = float(x[lo])
        else:
            x_left = _interpolate_crossing(x[i], x[i + 1], y[i], y[i + 1], peak, base)

        i = p
        while i <= hi and y[i] > ref:
            i += 1
        if i > hi:
            x_right = float(x[hi])
        else:
            x_right = _interpolate_crossing(x[i], x[i - 1], y[i], y[i - 1], peak, base)

        out[k] = (x_left, x_right)
    return out


def find_peak_widths(
    y: np.ndarray,
    x: np.ndarray,
    peaks: np.ndarray,
    base_levels: np.ndarray,
    left_saddle: np.ndarray,
    right_saddle: np.ndarray,
    width_reference: str = "halfprom",
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Interpolated reference-line crossings for each peak.

    ``halfprom`` places the line half a prominence below the peak and bounds
    it by the peak's own saddles. ``halfheight`` places it at half the peak
    height and also clips each side at the valley shared with the adjacent
    peak, independently per side.

    Returns:
        ``(width_bounds_x, left_bound, right_bound)``; the bounds are the
        sample indices the crossings were limited to.
    """
    arr = np.asarray(y, dtype=float)
    idx = np.asarray(peaks, dtype=np.intp)
    if idx.size == 0:
        empty = np.zeros(0, dtype=np.intp)
        return np.zeros((0, 2), dtype=float), empty, empty

    if width_reference == "halfheight":
        ref_base = np.zeros(idx.size, dtype=float)
        # lowest sample between each pair of neighbouring peaks
        borders = np.array(
            [p + int(np.nanargmin(arr[p : q + 1])) for p, q in zip(idx[:-1].tolist(), idx[1:].tolist())],
            dtype=np.intp,
        )
        left_bound = np.concatenate(
            [left_saddle[:1], np.maximum(left_saddle[1:], borders)]
        ).astype(np.intp)
        right_bound = np.concatenate(
            [np.minimum(right_saddle[:-1], borders), right_saddle[-1:]]
        ).astype(np.intp)
    else:
        ref_base = np.asarray(base_levels, dtype=float)
        left_bound = np.asarray(left_saddle, dtype=np.intp)
        right_bound = np.asarray(right_saddle, dtype=np.intp)

    bounds = _reference_bounds(
        arr, np.asarray(x, dtype=float), idx, ref_base, left_bound, right_bound
    )
    return bounds, left_bound, right_bound


def find_extents(
    y: np.ndarray,
    x: np.ndarray,
    candidates: np.ndarray,
    finite_peaks: np.ndarray,
    infinite_peaks: np.ndarray,
    inflections: np.ndarray,
    *,
    min_prominence: float = 0.0,
    min_width: float = 0.0,
    max_width: float = math.inf,
    width_reference: str = "halfprom",
) -> PeakExtents:
    """Compute bases and widths, merge in infinite peaks, and filter.

    Infinite peaks get a zero base and borders half-way to their immediate
    neighbours. Peaks below ``min_prominence`` are dropped before widths are
    measured; peaks outside ``[min_width, max_width]`` are dropped last.
    """
    arr = np.asarray(y, dtype=float)
    locs = np.asarray(x, dtype=float)
    inf_idx = np.asarray(infinite_peaks, dtype=np.intp)

    y_finite = arr.copy()
    y_finite[inf_idx] = np.nan

    idx = np.asarray(candidates, dtype=np.intp)
    levels, left_saddle, right_saddle = find_peak_bases(
        y_finite, idx, finite_peaks, inflections
    )

    keep = (arr[idx] - levels) >= min_prominence
    idx = idx[keep]
    levels = levels[keep]
    left_saddle = left_saddle[keep]
    right_saddle = right_saddle[keep]
    logger.debug("Prominence filter kept %d of %d peaks", idx.size, keep.size)

    width_x, left_bound, right_bound = find_peak_widths(
        y_finite, locs, idx, levels, left_saddle, right_saddle, width_reference
    )

    last = arr.size - 1
    inf_left = np.maximum(inf_idx - 1, 0)
    inf_right = np.minimum(inf_idx + 1, last)
    inf_bounds_x = np.column_stack(
        [0.5 * (locs[inf_idx] + locs[inf_left]), 0.5 * (locs[inf_idx] + locs[inf_right])]
    )

    all_idx = np.concatenate([idx, inf_idx])
    order = np.argsort(all_idx, kind="stable")
    extents = PeakExtents(
        indices=all_idx[order],
        bases=np.concatenate([levels, np.zeros(inf_idx.size)])[order],
        base_bounds_x=np.vstack(
            [np.column_stack([locs[left_bound], locs[right_bound]]), inf_bounds_x]
        )[order],
        base_bounds_y=np.vstack(
            [
                np.column_stack([arr[left_bound], arr[right_bound]]),
                np.column_stack([arr[inf_left], arr[inf_right]]),
            ]
        )[order],
        width_bounds_x=np.vstack([width_x, inf_bounds_x])[order],
    )

    if min_width > 0 or max_width < math.inf:
        widths = extents.width_bounds_x[:, 1] - extents.width_bounds_x[:, 0]
        extents = extents.take((widths >= min_width) & (widths <= max_width))
        logger.debug("Width filter kept %d of %d peaks", extents.indices.size, widths.size)
    return extents
