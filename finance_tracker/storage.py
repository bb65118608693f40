"""Key-value persistence for user records.

The tracker keeps every record collection of a user under its own key
(``"<collection>_<user_id>"``) in a small key-value store.  Collections are
always read and written whole: there is no partial update and no locking, the
last writer wins.

Three stores are provided:

* :class:`MemoryStore` - a dictionary, for tests and throwaway sessions
* :class:`JsonFileStore` - one JSON file per key in a directory
* :class:`SqliteStore` - a single SQLite table of JSON values

:class:`FinanceStorage` sits on top of any of them and turns stored payloads
back into typed records.
"""

from __future__ import annotations

import json
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type

import structlog

from .config import DB_PATH, STORE_DIR, ensure_data_directories
from .exceptions import UnknownCollectionError
from .models import (
    DEFAULT_CATEGORIES,
    Budget,
    BudgetAlert,
    Category,
    IncomeSource,
    SavingsGoal,
    Transaction,
)
from .serialization import records_from_list, records_to_list

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Key-value stores
# ---------------------------------------------------------------------------


class KeyValueStore(ABC):
    """Minimal synchronous key-value store holding JSON-compatible values."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``.  Missing keys are ignored."""


def _check_key(key: str) -> str:
    if not key or not key.strip():
        raise ValueError("Storage key cannot be empty")
    return key


class MemoryStore(KeyValueStore):
    """Dictionary-backed store.

    Values are round-tripped through JSON on write so a memory store behaves
    like the persistent ones (no shared references, no non-JSON values).
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(_check_key(key))
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[_check_key(key)] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(_check_key(key), None)


def safe_filename(name: str, default: str = 'key') -> str:
    """Create a safe filename from a storage key.

    Keeps alphanumerics, underscores, hyphens and dots; everything else
    becomes an underscore.

    Example:
        >>> safe_filename("transactions_3f2a/../x")
        'transactions_3f2a_.._x'
    """
    if not name:
        return default
    cleaned = ''.join(c if c.isalnum() or c in {'_', '-', '.'} else '_' for c in name.strip())
    cleaned = cleaned.strip('.')
    return cleaned if cleaned else default


class JsonFileStore(KeyValueStore):
    """Handles one JSON file per key inside a directory."""

    def __init__(self, directory: Optional[Path] = None):
        """Initialize the file store.

        Args:
            directory: Optional custom directory for the files.
                       Defaults to STORE_DIR from config.
        """
        if directory is None:
            ensure_data_directories()
            directory = STORE_DIR
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def get_path(self, key: str) -> Path:
        return self.directory / f"{safe_filename(_check_key(key))}.json"

    def get(self, key: str) -> Optional[Any]:
        """Load the value stored under ``key``.

        Note:
            Corrupted or unreadable files are logged and treated as missing.
        """
        target = self.get_path(key)
        if not target.exists():
            return None
        try:
            with target.open('r', encoding='utf-8') as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read stored value", key=key, path=str(target), error=str(e))
            return None

    def set(self, key: str, value: Any) -> None:
        """Write ``value`` to the file for ``key``.

        Raises:
            ValueError: If the key is empty
            OSError: If the file cannot be written
        """
        target = self.get_path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with target.open('w', encoding='utf-8') as handle:
                json.dump(value, handle, indent=2, sort_keys=True)
        except OSError as e:
            raise OSError(f"Failed to save {key!r} to {target}: {e}") from e

    def remove(self, key: str) -> None:
        target = self.get_path(key)
        if not target.exists():
            return
        try:
            target.unlink()
        except OSError as e:
            raise OSError(f"Failed to delete stored file {target}: {e}") from e


SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class SqliteStore(KeyValueStore):
    """Key-value store kept in a single SQLite table."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
        finally:
            conn.close()

    def get(self, key: str) -> Optional[Any]:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (_check_key(key),)
            ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.warning("Could not decode stored value", key=key, error=str(e))
            return None

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, sort_keys=True)
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (_check_key(key), payload),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        with self.connect() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (_check_key(key),))
            conn.commit()


# ---------------------------------------------------------------------------
# Record collections
# ---------------------------------------------------------------------------


COLLECTIONS: Dict[str, Type[Any]] = {
    'transactions': Transaction,
    'categories': Category,
    'budgets': Budget,
    'savings_goals': SavingsGoal,
    'income_sources': IncomeSource,
    'budget_alerts': BudgetAlert,
}


@dataclass
class FinanceData:
    """Every record collection of one user."""

    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    budgets: List[Budget] = field(default_factory=list)
    savings_goals: List[SavingsGoal] = field(default_factory=list)
    income_sources: List[IncomeSource] = field(default_factory=list)
    budget_alerts: List[BudgetAlert] = field(default_factory=list)


def collection_key(collection_name: str, user_id: str) -> str:
    return f"{collection_name}_{user_id}"


class FinanceStorage:
    """Loads and saves whole record collections for a user."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, user_id: str) -> FinanceData:
        """Read every collection of ``user_id``.

        Missing collections come back empty, except categories which fall
        back to the default category set.
        """
        data = FinanceData()
        for name, cls in COLLECTIONS.items():
            payload = self.store.get(collection_key(name, user_id))
            if payload is None:
                continue
            if not isinstance(payload, list):
                logger.warning("Ignoring malformed collection", collection=name, user_id=user_id)
                continue
            setattr(data, name, records_from_list(cls, payload))
        return data

    def load_collection(self, user_id: str, collection_name: str) -> List[Any]:
        cls = self._record_class(collection_name)
        payload = self.store.get(collection_key(collection_name, user_id))
        if payload is None:
            return list(DEFAULT_CATEGORIES) if collection_name == 'categories' else []
        return records_from_list(cls, payload)

    def save(self, user_id: str, collection_name: str, records: Sequence[Any]) -> None:
        """Replace the stored ``collection_name`` of ``user_id`` with ``records``.

        Raises:
            UnknownCollectionError: If ``collection_name`` is not a known collection
        """
        self._record_class(collection_name)
        self.store.set(collection_key(collection_name, user_id), records_to_list(records))

    @staticmethod
    def _record_class(collection_name: str) -> Type[Any]:
        try:
            return COLLECTIONS[collection_name]
        except KeyError:
            raise UnknownCollectionError(collection_name) from None
