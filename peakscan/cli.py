"""Command-line interface for running a peak search over a CSV column."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import pandas as pd

from peakscan.config import config_from_mapping, load_json_config
from peakscan.core.compute import find_peaks
from peakscan.core.types import PeakConfig, SORT_ORDERS, WIDTH_REFERENCES
from peakscan.utils import ensure_dir, setup_logger

# CLI flag -> PeakConfig field
_OPTION_FLAGS = {
    "min_peak_height": float,
    "min_peak_prominence": float,
    "min_peak_width": float,
    "max_peak_width": float,
    "min_peak_distance": float,
    "threshold": float,
    "max_peak_count": int,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peakscan", description="Find peaks in one column of a CSV file."
    )
    parser.add_argument("csv", help="Input CSV file")
    parser.add_argument("--column", required=True, help="Column holding the signal")
    axis = parser.add_mutually_exclusive_group()
    axis.add_argument("--x-column", default=None, help="Column holding sample locations")
    axis.add_argument("--sample-rate", type=float, default=None, help="Samples per x unit")
    parser.add_argument("--config", default=None, help="JSON file with peak options")
    for name, kind in _OPTION_FLAGS.items():
        parser.add_argument(f"--{name.replace('_', '-')}", type=kind, default=None)
    parser.add_argument("--sort-order", choices=SORT_ORDERS, default=None)
    parser.add_argument("--width-reference", choices=WIDTH_REFERENCES, default=None)
    parser.add_argument(
        "--extents",
        action="store_true",
        help="Report widths, prominences and borders",
    )
    parser.add_argument("--out", default=None, help="Output CSV (default: stdout)")
    parser.add_argument("--log-file", default=None, help="Also write the log here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _resolve_options(args: argparse.Namespace) -> PeakConfig:
    data: dict[str, Any] = {}
    if args.config:
        data.update(load_json_config(args.config))
    for name in [*_OPTION_FLAGS, "sort_order", "width_reference"]:
        value = getattr(args, name)
        if value is not None:
            data[name] = value
    return config_from_mapping(data)


def _read_signal(args: argparse.Namespace) -> tuple[np.ndarray, np.ndarray | None]:
    path = Path(args.csv)
    if not path.exists():
        raise FileNotFoundError(f"Input file '{args.csv}' not found.")
    frame = pd.read_csv(path)
    for col in [args.column, args.x_column]:
        if col is not None and col not in frame.columns:
            raise KeyError(f"Column '{col}' not found in {path}.")
    y = pd.to_numeric(frame[args.column], errors="coerce").to_numpy(dtype=float)
    x = None
    if args.x_column is not None:
        x = pd.to_numeric(frame[args.x_column], errors="coerce").to_numpy(dtype=float)
    return y, x


def main(argv: Iterable[str] | None = None) -> int:
    """Run the peak search CLI.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code (0 for success, 2 for invalid input).
    """
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logger = setup_logger(
        "peakscan",
        Path(args.log_file) if args.log_file else None,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = _resolve_options(args)
        y, x = _read_signal(args)
        result = find_peaks(
            y,
            x,
            sample_rate=args.sample_rate,
            config=config,
            return_extents=args.extents,
        )
    except (FileNotFoundError, KeyError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    logger.info("Found %d peaks in %d samples", len(result), y.size)
    table = result.to_frame()
    if args.out:
        out_path = Path(args.out)
        ensure_dir(out_path.parent.as_posix())
        table.to_csv(out_path, index=False)
        logger.info("Wrote %s", out_path.as_posix())
    else:
        table.to_csv(sys.stdout, index=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
