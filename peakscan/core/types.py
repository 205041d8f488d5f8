"""Typed configuration and result containers for peak detection."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any

import numpy as np

SORT_ORDERS = ("none", "ascend", "descend")
WIDTH_REFERENCES = ("halfprom", "halfheight")

_SORT_ALIASES = {
    "none": "none",
    "ascend": "ascend",
    "ascending": "ascend",
    "descend": "descend",
    "descending": "descend",
}
_WIDTH_ALIASES = {
    "halfprom": "halfprom",
    "halfprominence": "halfprom",
    "half_prominence": "halfprom",
    "halfheight": "halfheight",
    "half_height": "halfheight",
}


class PeakHeightWarning(RuntimeWarning):
    """Issued when ``min_peak_height`` removes every candidate peak."""


@dataclass(frozen=True)
class PeakConfig:
    """Filter and ordering options for one peak search.

    ``max_peak_count=None`` means "as many peaks as there are samples".
    """

    min_peak_height: float = -math.inf
    min_peak_prominence: float = 0.0
    min_peak_width: float = 0.0
    max_peak_width: float = math.inf
    min_peak_distance: float = 0.0
    threshold: float = 0.0
    max_peak_count: int | None = None
    sort_order: str = "none"
    width_reference: str = "halfprom"

    @property
    def needs_extents(self) -> bool:
        """Whether prominence/width filtering forces extent computation."""
        return (
            self.min_peak_prominence > 0
            or self.min_peak_width > 0
            or self.max_peak_width < math.inf
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PeakExtents:
    """Per-peak bases and width borders, index-aligned with ``indices``.

    - `bases`: prominence base level of each peak.
    - `base_bounds_x` / `base_bounds_y`: (n, 2) left/right border coordinates.
    - `width_bounds_x`: (n, 2) interpolated reference-line crossings.
    """

    indices: np.ndarray
    bases: np.ndarray
    base_bounds_x: np.ndarray
    base_bounds_y: np.ndarray
    width_bounds_x: np.ndarray

    def take(self, keep: np.ndarray) -> "PeakExtents":
        return PeakExtents(
            indices=self.indices[keep],
            bases=self.bases[keep],
            base_bounds_x=self.base_bounds_x[keep],
            base_bounds_y=self.base_bounds_y[keep],
            width_bounds_x=self.width_bounds_x[keep],
        )


@dataclass(frozen=True)
class PeakResult:
    """Output of `find_peaks`.

    All arrays share one ordering (the requested sort order). `widths`,
    `prominences` and the bound arrays are ``None`` unless extents were
    computed.
    """

    values: np.ndarray
    locations: np.ndarray
    indices: np.ndarray
    widths: np.ndarray | None = None
    prominences: np.ndarray | None = None
    base_bounds_x: np.ndarray | None = None
    base_bounds_y: np.ndarray | None = None
    width_bounds_x: np.ndarray | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def has_extents(self) -> bool:
        return self.widths is not None

    def to_frame(self):
        """Return the peaks as a :class:`pandas.DataFrame`, one row per peak."""
        import pandas as pd

        data: dict[str, np.ndarray] = {
            "index": self.indices,
            "location": self.locations,
            "value": self.values,
        }
        if self.has_extents:
            data["width"] = self.widths
            data["prominence"] = self.prominences
            data["base_left_x"] = self.base_bounds_x[:, 0]
            data["base_right_x"] = self.base_bounds_x[:, 1]
            data["base_left_y"] = self.base_bounds_y[:, 0]
            data["base_right_y"] = self.base_bounds_y[:, 1]
            data["width_left_x"] = self.width_bounds_x[:, 0]
            data["width_right_x"] = self.width_bounds_x[:, 1]
        return pd.DataFrame(data)


def _real_scalar(name: str, value: Any) -> float:
    if isinstance(value, (bool, np.bool_)):
        raise ValueError(f"{name} must be a real number, got {value!r}.")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a real number, got {value!r}.") from exc
    if math.isnan(out):
        raise ValueError(f"{name} must not be NaN.")
    return out


def _nonnegative(name: str, value: Any) -> float:
    out = _real_scalar(name, value)
    if out < 0:
        raise ValueError(f"{name} must be nonnegative, got {out}.")
    return out


def _choice(name: str, value: Any, aliases: dict[str, str]) -> str:
    key = str(value).strip().lower()
    if key not in aliases:
        allowed = ", ".join(sorted(set(aliases.values())))
        raise ValueError(f"Unsupported {name} {value!r}. Use one of: {allowed}.")
    return aliases[key]


def resolve_config(
    config: PeakConfig | None = None,
    *,
    n_samples: int,
    span: float | None = None,
    **overrides: Any,
) -> PeakConfig:
    """Validate and normalise a `PeakConfig` for a signal of ``n_samples``.

    Keyword overrides replace fields of ``config``. ``span`` is the extent of
    the x-axis (``x[-1] - x[0]``); the minimum peak distance must be smaller.
    """
    cfg = PeakConfig() if config is None else config
    known = {f.name for f in fields(PeakConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown peak option(s): {', '.join(unknown)}.")
    if overrides:
        cfg = replace(cfg, **overrides)

    sort_order = _choice("sort_order", cfg.sort_order, _SORT_ALIASES)
    width_reference = _choice("width_reference", cfg.width_reference, _WIDTH_ALIASES)

    min_height = _real_scalar("min_peak_height", cfg.min_peak_height)
    if width_reference == "halfheight":
        # peaks below zero have no half-height crossing
        min_height = max(min_height, 0.0)

    min_prominence = _nonnegative("min_peak_prominence", cfg.min_peak_prominence)
    min_width = _nonnegative("min_peak_width", cfg.min_peak_width)
    if not math.isfinite(min_width):
        raise ValueError("min_peak_width must be finite.")
    max_width = _nonnegative("max_peak_width", cfg.max_peak_width)
    threshold = _nonnegative("threshold", cfg.threshold)

    min_distance = _nonnegative("min_peak_distance", cfg.min_peak_distance)
    if span is not None and min_distance > 0 and not min_distance < span:
        raise ValueError(
            f"min_peak_distance must be smaller than the x-axis span ({span}), got {min_distance}."
        )

    if cfg.max_peak_count is None:
        max_count = int(n_samples)
    else:
        raw = cfg.max_peak_count
        if isinstance(raw, (bool, np.bool_)):
            raise ValueError("max_peak_count must be a positive integer.")
        count = _real_scalar("max_peak_count", raw)
        if not count.is_integer() or count <= 0:
            raise ValueError(f"max_peak_count must be a positive integer, got {raw!r}.")
        max_count = int(count)

    return PeakConfig(
        min_peak_height=min_height,
        min_peak_prominence=min_prominence,
        min_peak_width=min_width,
        max_peak_width=max_width,
        min_peak_distance=min_distance,
        threshold=threshold,
        max_peak_count=max_count,
        sort_order=sort_order,
        width_reference=width_reference,
    )
