"""Central definitions for repository paths used across the application."""

from __future__ import annotations

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
LOGS_DIR = BASE_DIR / "logs"
CONFIG_DIR = BASE_DIR / "config"

DEFAULT_LOG_FILE = LOGS_DIR / "logtailer.log"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "logtailer.yaml"


__all__ = [
    "BASE_DIR",
    "LOGS_DIR",
    "CONFIG_DIR",
    "DEFAULT_LOG_FILE",
    "DEFAULT_CONFIG_FILE",
]
