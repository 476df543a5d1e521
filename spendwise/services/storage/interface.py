"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger persistence.
This allows us to:
1. Keep the JSON file as the durable store while staying swappable
2. Use in-memory storage for testing
3. Keep the engine decoupled from file handling

The unit of persistence is the whole LedgerSnapshot. There is no per-record
API: callers load, mutate and save the snapshot as one piece, holding
`lock` across the cycle so concurrent coroutines cannot lose each other's
updates.
"""

import asyncio
import weakref
from abc import ABC, abstractmethod

from spendwise.models.ledger import LedgerSnapshot


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    Implementations never raise from load() or save(): failures are
    recovered (load) or reported as False (save), and logged.
    """

    def __init__(self):
        # asyncio.Lock binds to the loop it is first used on, so each running
        # loop gets its own lock.
        self._locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = (
            weakref.WeakKeyDictionary()
        )

    @property
    def lock(self) -> asyncio.Lock:
        """
        Mutual exclusion for one load-mutate-save cycle on the running loop.

        Must be accessed from a coroutine. Not re-entrant: do not call
        another locking operation while holding it.
        """
        loop = asyncio.get_running_loop()
        lock = self._locks.get(loop)
        if lock is None:
            lock = self._locks[loop] = asyncio.Lock()
        return lock

    @abstractmethod
    async def load(self) -> LedgerSnapshot:
        """
        Load a fresh copy of the full ledger.

        Returns:
            The stored snapshot, or an empty snapshot if nothing is stored
            or the stored data cannot be read.
        """
        pass

    @abstractmethod
    async def save(self, snapshot: LedgerSnapshot) -> bool:
        """
        Replace the stored ledger with `snapshot`.

        Args:
            snapshot: The complete ledger to persist

        Returns:
            True if saved successfully, False otherwise
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotReadError(StorageError):
    """Stored ledger exists but could not be read or parsed."""
    pass


class CorruptSnapshotError(SnapshotReadError):
    """Stored ledger is not valid JSON or does not match the ledger schema."""
    pass


class SnapshotWriteError(StorageError):
    """Ledger could not be written."""
    pass
