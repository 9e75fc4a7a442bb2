"""Centralised logging helpers for the MBDyn language server."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, Optional

ROOT_LOGGER_NAME = "mbdyn_lsp"

_LOGGER_CACHE: Dict[str, logging.Logger] = {}

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a cached :class:`logging.Logger` instance."""

    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = logging.getLogger(name)
    return _LOGGER_CACHE[name]


def parse_level(value: Optional[str], default: int = logging.INFO) -> int:
    if not value:
        return default
    return _LEVELS.get(value.strip().lower(), default)


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """Attach a single handler to the package logger.

    The handler writes to *log_file* when given and to stderr otherwise.
    Stdout is reserved for the protocol stream when the server runs over
    stdio, so it is never used here.
    """

    logger = get_logger(ROOT_LOGGER_NAME)
    logger.setLevel(parse_level(level))

    for handler in list(logger.handlers):
        if getattr(handler, "_mbdyn_lsp_handler", False):
            logger.removeHandler(handler)
            handler.close()

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    handler._mbdyn_lsp_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = ["ROOT_LOGGER_NAME", "configure_logging", "get_logger", "parse_level"]
