from __future__ import annotations

import logging
import os
from typing import Optional


_CONFIGURED = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("CALIBRATION_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for calibration tools.

    Args:
        level: Optional log level name (e.g., "INFO", "DEBUG"). If omitted,
               reads CALIBRATION_LOG_LEVEL, then LOG_LEVEL, else INFO.
               An explicit level passed after the first call still
               adjusts the root logger.
    """
    global _CONFIGURED
    if _CONFIGURED:
        if level:
            logging.getLogger().setLevel(_resolve_level(level))
        return

    logging.basicConfig(level=_resolve_level(level), format=LOG_FORMAT)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with global config ensured."""
    setup_logging()
    return logging.getLogger(name)
