"""Configuration loading utilities for peak searches."""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Any, Mapping

from peakscan.core.types import PeakConfig


def load_json_config(path: str | Path) -> dict[str, Any]:
    """Load a peak-search config from a JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if config_path.suffix.lower() != ".json":
        raise ValueError(
            f"Unsupported config format for '{config_path}'. Use a .json config file."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in config '{config_path}' at line {exc.lineno}, "
            f"column {exc.colno}: {exc.msg}"
        ) from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid config root in '{config_path}': expected JSON object, got {type(data).__name__}."
        )
    return data


def config_from_mapping(data: Mapping[str, Any]) -> PeakConfig:
    """Build a `PeakConfig` from a mapping of field names.

    JSON has no infinity literal, so ``null`` leaves a field at its default.
    Values are validated later by `resolve_config`.
    """
    known = {f.name for f in fields(PeakConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown peak option(s) in config: {', '.join(unknown)}. "
            f"Allowed: {', '.join(sorted(known))}."
        )
    return PeakConfig(**{k: v for k, v in data.items() if v is not None})
