"""Core peak search (no plotting, no filesystem I/O)."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from peakscan.core.extents import find_extents
from peakscan.core.extrema import combine_peaks, find_local_extrema
from peakscan.core.filters import remove_small_peaks
from peakscan.core.suppression import select_by_distance
from peakscan.core.types import PeakConfig, PeakExtents, PeakResult, resolve_config
from peakscan.core.utils import as_signal, resolve_locations

logger = logging.getLogger(__name__)


def assemble_result(
    y: np.ndarray,
    x: np.ndarray,
    peaks: np.ndarray,
    order: np.ndarray,
    max_count: int,
    extents: PeakExtents | None = None,
    metadata: dict[str, Any] | None = None,
) -> PeakResult:
    """Cap ``order`` at ``max_count`` entries and gather the peak arrays.

    ``order`` holds positions into ``peaks`` (and into ``extents`` when given),
    already in the requested output order.
    """
    sel = np.asarray(order, dtype=np.intp)[: int(max_count)]
    idx = np.asarray(peaks, dtype=np.intp)[sel]
    values = np.asarray(y, dtype=float)[idx]
    locations = np.asarray(x, dtype=float)[idx]

    if extents is None:
        return PeakResult(
            values=values,
            locations=locations,
            indices=idx,
            metadata=dict(metadata or {}),
        )

    width_x = extents.width_bounds_x[sel]
    return PeakResult(
        values=values,
        locations=locations,
        indices=idx,
        widths=width_x[:, 1] - width_x[:, 0],
        prominences=values - extents.bases[sel],
        base_bounds_x=extents.base_bounds_x[sel],
        base_bounds_y=extents.base_bounds_y[sel],
        width_bounds_x=width_x,
        metadata=dict(metadata or {}),
    )


def find_peaks(
    samples: np.ndarray,
    x: np.ndarray | None = None,
    *,
    sample_rate: float | None = None,
    config: PeakConfig | None = None,
    return_extents: bool = False,
    **options: Any,
) -> PeakResult:
    """Find local peaks of a 1D signal.

    A peak is a sample larger than both neighbours (the first sample of a
    flat top counts once) or any +Inf sample. +Inf peaks skip the height and
    threshold tests but still compete in distance suppression.

    Args:
        samples: At least 3 real values; NaN and +/-Inf are allowed.
        x: Strictly increasing locations of the samples. Defaults to the
            sample index.
        sample_rate: Alternative to ``x``; locations become ``index / rate``.
        config: Base options. Keyword ``options`` override its fields, e.g.
            ``find_peaks(y, min_peak_distance=5, sort_order="descend")``.
        return_extents: Also report widths, prominences and borders even when
            no prominence or width filter needs them.

    Returns:
        A `PeakResult` whose arrays follow ``config.sort_order``.

    Raises:
        ValueError: On any invalid input or option; nothing is scanned.
    """
    y = as_signal(samples)
    locs = resolve_locations(y.size, x=x, sample_rate=sample_rate)
    cfg = resolve_config(config, n_samples=y.size, span=float(locs[-1] - locs[0]), **options)
    need_extents = bool(return_extents) or cfg.needs_extents

    finite, infinite, inflections = find_local_extrema(y)
    candidates = remove_small_peaks(
        y,
        finite,
        min_height=cfg.min_peak_height,
        threshold=cfg.threshold,
        warn_if_empty=cfg.width_reference != "halfheight",
    )

    extents: PeakExtents | None = None
    if need_extents:
        extents = find_extents(
            y,
            locs,
            candidates,
            finite,
            infinite,
            inflections,
            min_prominence=cfg.min_peak_prominence,
            min_width=cfg.min_peak_width,
            max_width=cfg.max_peak_width,
            width_reference=cfg.width_reference,
        )
        peaks = extents.indices
    else:
        peaks = combine_peaks(candidates, infinite)

    order = select_by_distance(y[peaks], locs[peaks], cfg.min_peak_distance, cfg.sort_order)
    logger.debug("Retained %d peaks (cap %d)", order.size, cfg.max_peak_count)

    meta: dict[str, Any] = {
        "n_samples": int(y.size),
        "n_candidates": int(finite.size + infinite.size),
        "config": cfg.to_dict(),
    }
    return assemble_result(y, locs, peaks, order, cfg.max_peak_count, extents, meta)
