# loanvest/logs.py
"""
Logging helpers.

- Module code uses `get_logger(__name__)`; nothing is printed unless the
  application calls `configure_logging()`.
- LOANVEST_DEBUG=1 raises the level to DEBUG and adds a rotating file log at
  logs/loanvest_debug.log (best-effort; a log that cannot be opened never
  breaks a run).
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

ROOT_LOGGER = "loanvest"
DEBUG_LOG_PATH = os.path.join("logs", "loanvest_debug.log")

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "(%Y-%m-%d %H:%M:%S)"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package root (names outside it are nested as-is)."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def debug_enabled() -> bool:
    return os.getenv("LOANVEST_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def _file_handler(path: str) -> logging.Handler | None:
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError as exc:
        print(f"[loanvest] debug log unavailable ({path}): {exc}", file=sys.stderr, flush=True)
        return None
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    return handler


def configure_logging(level: int | None = None, *, debug: bool | None = None) -> logging.Logger:
    """
    Install handlers on the package logger (idempotent).

    Args:
        level: Console level. Defaults to DEBUG in debug mode, WARNING otherwise.
        debug: Force debug mode on/off; None reads LOANVEST_DEBUG.
    """
    debug = debug_enabled() if debug is None else debug
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else (level or logging.WARNING))

    # Avoid duplicate handlers if reconfigured in REPL/tests
    console = next((h for h in logger.handlers if type(h) is logging.StreamHandler), None)
    if console is None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(fmt="%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(console)
    console.setLevel(level or (logging.DEBUG if debug else logging.WARNING))

    # Debug can be switched on after a plain configure; add the file log then
    if debug and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        fh = _file_handler(DEBUG_LOG_PATH)
        if fh is not None:
            logger.addHandler(fh)

    return logger
