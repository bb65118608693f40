"""Configuration management for the finance tracker.

This module centralizes paths and defaults, with environment variable
overrides for everything that touches the local disk.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))
STORE_DIR = DATA_DIR / "store"

# SQLite-backed key-value store
DB_PATH = Path(
    os.getenv("FINTRACK_DB_PATH", DATA_DIR / "finance_tracker.db")
).resolve()

# Display currency used when a user record carries none
DEFAULT_CURRENCY = os.getenv("FINTRACK_DEFAULT_CURRENCY", "USD")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORE_DIR]:
        directory.mkdir(parents=True, exist_ok=True)
