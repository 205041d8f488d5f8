"""Shared utilities for peakscan entry points."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def ensure_dir(path: str) -> None:
    """Create a directory (and parents) if it does not exist."""
    if path == "":
        return
    os.makedirs(path, exist_ok=True)


def setup_logger(
    logger_name: str,
    log_path: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Attach a stream handler (and optionally a file handler) to ``logger_name``."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    if log_path is not None:
        ensure_dir(log_path.parent.as_posix())
        fh = logging.FileHandler(log_path, mode="w", encoding="utf-8")
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger
