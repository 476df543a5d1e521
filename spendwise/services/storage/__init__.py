"""
Storage Services Package

Provides the abstract ledger storage interface and its implementations.
The JSON file is the durable backend; memory storage serves tests.
"""

from spendwise.services.storage.interface import (
    CorruptSnapshotError,
    LedgerStorageInterface,
    SnapshotReadError,
    SnapshotWriteError,
    StorageError,
)
from spendwise.services.storage.json_file import JsonFileLedgerStorage
from spendwise.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "CorruptSnapshotError",
    "SnapshotReadError",
    "SnapshotWriteError",
    "StorageError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
