"""Logging helper for the cbrrates package."""

from __future__ import annotations

import logging

_CONFIGURED = False


def get_logger(name: str = "cbrrates") -> logging.Logger:
    """Return a logger, configuring the root handler on first use."""
    global _CONFIGURED
    if not _CONFIGURED:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        _CONFIGURED = True
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between INFO and WARNING."""
    level = logging.INFO if verbose else logging.WARNING
    get_logger().setLevel(level)
