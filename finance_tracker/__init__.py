"""Top-level package for the Finance Tracker.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``models`` – record types and typed patches
* ``storage`` – key-value stores and the per-user record persistence
* ``identity`` – local accounts and the signed-in session
* ``repository`` – add/update/delete for the signed-in user's records
* ``analytics`` – pure aggregation functions behind every report
* ``currency`` – display-currency formatting

A typical session wires the services together explicitly:

```python
store = JsonFileStore()
identity = IdentityService(store)
repository = FinanceRepository(FinanceStorage(store), identity)
```
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from .currency import format_currency
from .identity import IdentityService
from .repository import FinanceRepository
from .storage import FinanceStorage, JsonFileStore, MemoryStore, SqliteStore

__all__ = [
    "analytics",
    "format_currency",
    "IdentityService",
    "FinanceRepository",
    "FinanceStorage",
    "JsonFileStore",
    "MemoryStore",
    "SqliteStore",
]
