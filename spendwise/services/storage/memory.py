"""
In-Memory Storage Implementation

Holds the ledger in process memory. Useful for tests and for embedding
the engine where no file should be touched.

Each load() hands out a deep copy, so callers get the same
load-mutate-save semantics as with the file backend: nothing changes
until save() is called.
"""

from typing import Optional

from spendwise.models.ledger import LedgerSnapshot
from spendwise.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger snapshot kept in memory."""

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        super().__init__()
        self._snapshot = snapshot.model_copy(deep=True) if snapshot else LedgerSnapshot()
        self.save_count = 0

    async def load(self) -> LedgerSnapshot:
        return self._snapshot.model_copy(deep=True)

    async def save(self, snapshot: LedgerSnapshot) -> bool:
        self._snapshot = snapshot.model_copy(deep=True)
        self.save_count += 1
        return True
