"""
Persistent Storage Module.

Provides the ordered key-value store the auction state lives in:
- MemoryStorage and SQLiteStorage backends
- StorageTransaction for all-or-nothing invocations
- PrefixedStorage for per-contract namespaces
"""

from openbid.core.storage.base import Storage, MemoryStorage
from openbid.core.storage.sqlite_adapter import SQLiteStorage
from openbid.core.storage.transaction import (
    StorageTransaction,
    PrefixedStorage,
    to_length_prefixed,
    prefix_upper_bound,
)

__all__ = [
    "Storage",
    "MemoryStorage",
    "SQLiteStorage",
    "StorageTransaction",
    "PrefixedStorage",
    "to_length_prefixed",
    "prefix_upper_bound",
]
