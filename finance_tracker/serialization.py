"""Conversion between records and JSON-compatible dictionaries.

Dates are written as ISO-8601 strings.  A date-only value is written as
``YYYY-MM-DD`` and a date-time value keeps its time component, so reading a
payload back can tell the two apart and rebuild exactly what was saved.
"""

from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Type

from .models import R


def to_iso(value: Any) -> Any:
    """Render ``date``/``datetime`` values as ISO strings; pass everything else through."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def parse_iso(value: Any) -> Any:
    """Parse an ISO string back into a ``date`` or ``datetime``.

    Strings with a time component (``T`` separator) become ``datetime``
    objects, bare dates become ``date`` objects.  Non-string values are
    returned unchanged so already-parsed values survive a second pass.
    """
    if not isinstance(value, str):
        return value
    if 'T' in value:
        return datetime.fromisoformat(value)
    return date.fromisoformat(value)


def record_to_dict(record: Any) -> Dict[str, Any]:
    return {field.name: to_iso(getattr(record, field.name)) for field in fields(record)}


def record_from_dict(cls: Type[R], payload: Dict[str, Any]) -> R:
    """Build a ``cls`` record from a stored payload.

    Keys that are not fields of ``cls`` are dropped.  Fields listed in
    ``cls.DATE_FIELDS`` are parsed back to date values.
    """
    known = {field.name for field in fields(cls)}
    values = {key: value for key, value in payload.items() if key in known}
    for name in cls.DATE_FIELDS:
        if name in values:
            values[name] = parse_iso(values[name])
    return cls(**values)


def records_to_list(records: Iterable[Any]) -> List[Dict[str, Any]]:
    return [record_to_dict(record) for record in records]


def records_from_list(cls: Type[R], payloads: Iterable[Dict[str, Any]]) -> List[R]:
    return [record_from_dict(cls, payload) for payload in payloads]
