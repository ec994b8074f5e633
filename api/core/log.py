"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging
import os

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def log_level() -> int:
    raw = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    # basicConfig is a no-op when handlers already exist (e.g. under uvicorn),
    # so only the level is forced.
    logging.basicConfig(level=log_level(), format=_LOG_FORMAT)
    logging.getLogger().setLevel(log_level())
