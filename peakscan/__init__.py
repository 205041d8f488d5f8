"""peakscan public API."""

from peakscan._version import __version__
from peakscan.config import config_from_mapping, load_json_config
from peakscan.core.compute import find_peaks
from peakscan.core.types import PeakConfig, PeakHeightWarning, PeakResult

__all__ = [
    "__version__",
    "find_peaks",
    "PeakConfig",
    "PeakResult",
    "PeakHeightWarning",
    "load_json_config",
    "config_from_mapping",
]
