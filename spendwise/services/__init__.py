"""Services package."""

from spendwise.services.credentials import PasswordHasher
from spendwise.services.storage import (
    CorruptSnapshotError,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    SnapshotReadError,
    SnapshotWriteError,
    StorageError,
)

__all__ = [
    # Credentials
    "PasswordHasher",
    # Storage services
    "CorruptSnapshotError",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerStorageInterface",
    "SnapshotReadError",
    "SnapshotWriteError",
    "StorageError",
]
