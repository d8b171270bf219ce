"""
log_setup.py – console + runtime.log handlers for every entry point.

Idempotent: calling setup_logging() twice does not duplicate handlers.
"""
from __future__ import annotations

import logging
import sys

import config

_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str | int | None = None,
                  log_path: str | None = None) -> logging.Logger:
    """Attach a stderr handler and a file handler to the root logger."""
    global _configured
    root = logging.getLogger()
    if _configured:
        return root

    level = level or config.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(level)

    fmt = logging.Formatter(_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    path = log_path or config.LOG_PATH
    if path:
        try:
            fh = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            root.warning("cannot open %s for logging: %s", path, exc)
        else:
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
    _configured = True
    return root
