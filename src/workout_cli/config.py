"""Environment-variable-based configuration for the command-line host."""

from __future__ import annotations

import logging
import os
from pathlib import Path


def parse_log_level(raw: str, default: str = "INFO") -> str:
    """Upper-cased level name, or *default* when logging does not know it."""
    level = raw.strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else default


STATE_DIR: Path = Path(os.environ.get("FITTRACK_STATE_DIR", "~/.fittrack")).expanduser()
CATALOG_PATH: str = os.environ.get("FITTRACK_CATALOG", "")
TICK_SECONDS: float = float(os.environ.get("FITTRACK_TICK_SECONDS", "1"))
LOG_LEVEL: str = parse_log_level(os.environ.get("FITTRACK_LOG_LEVEL", "INFO"))
UNITS: str = os.environ.get("FITTRACK_UNITS", "metric")
