"""Analytics thresholds.

Budget, goal and dashboard thresholds live in ``analytics.json`` next to
this module so they can be tuned without code changes.  The file is read
once per process.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

SETTINGS_PATH = Path(__file__).parent / 'analytics.json'


@lru_cache(maxsize=None)
def load_analytics_settings() -> Dict[str, Any]:
    """Read ``analytics.json``.

    Raises:
        FileNotFoundError: If the settings file is missing
        json.JSONDecodeError: If the settings file is not valid JSON
    """
    with SETTINGS_PATH.open('r', encoding='utf-8') as handle:
        return json.load(handle)


def analytics_setting(section: str, key: str, default: Any) -> Any:
    """Threshold ``key`` of ``section``, or ``default`` when it is not set.

    Example:
        >>> analytics_setting('goals', 'urgent_days', default=30)
        30
    """
    return load_analytics_settings().get(section, {}).get(key, default)


__all__ = ['SETTINGS_PATH', 'load_analytics_settings', 'analytics_setting']
