"""Core compute subpackage."""

from peakscan.core.compute import assemble_result, find_peaks
from peakscan.core.extents import find_extents, find_peak_bases, find_peak_widths
from peakscan.core.extrema import combine_peaks, find_local_extrema
from peakscan.core.filters import remove_small_peaks
from peakscan.core.suppression import order_peaks, select_by_distance
from peakscan.core.types import (
    PeakConfig,
    PeakExtents,
    PeakHeightWarning,
    PeakResult,
    resolve_config,
)

__all__ = [
    "PeakConfig",
    "PeakExtents",
    "PeakHeightWarning",
    "PeakResult",
    "assemble_result",
    "combine_peaks",
    "find_extents",
    "find_local_extrema",
    "find_peak_bases",
    "find_peak_widths",
    "find_peaks",
    "order_peaks",
    "remove_small_peaks",
    "resolve_config",
    "select_by_distance",
]
