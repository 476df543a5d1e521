"""
JSON File Storage Implementation

DESIGN DECISION: The ledger lives in a single JSON document because:
1. Users (and external tools) can read and back up their data directly
2. No database setup required
3. The document format is the durable contract between versions

TRADEOFFS:
- The whole file is rewritten on every mutation (fine for personal use)
- No native transactions: callers serialize load-mutate-save with `lock`
- A crash mid-write is avoided by writing a temp file and renaming it

Failures never propagate: an unreadable file loads as an empty ledger
(after being moved aside), and a failed write is reported as False.
"""

import asyncio
import contextlib
import os
from pathlib import Path
from typing import Optional

import simplejson
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from spendwise.audit import AuditLogger
from spendwise.config import LedgerSettings, get_settings
from spendwise.models.audit import AuditEventBuilder
from spendwise.models.ledger import LedgerSnapshot, utc_now
from spendwise.services.storage.interface import (
    CorruptSnapshotError,
    LedgerStorageInterface,
    SnapshotReadError,
    SnapshotWriteError,
)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger snapshot stored as one JSON file.

    Layout: {"Users": [...], "Transactions": [...]} with PascalCase keys.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__()
        self._settings = settings or get_settings().ledger
        self._path = self._settings.data_file
        self._audit = audit_logger or AuditLogger()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    async def load(self) -> LedgerSnapshot:
        """Load the ledger, recovering to an empty one on any failure."""
        try:
            return await asyncio.to_thread(self._read_snapshot)
        except SnapshotReadError as e:
            await self._audit.log(
                AuditEventBuilder.snapshot_load_failed(str(self._path), str(e))
            )
            if isinstance(e, CorruptSnapshotError) and self._settings.quarantine_corrupt_files:
                await self._quarantine()
            return LedgerSnapshot()

    def _read_snapshot(self) -> LedgerSnapshot:
        try:
            if not self._path.exists():
                return LedgerSnapshot()
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotReadError(f"Failed to read ledger file: {e}") from e

        if not text.strip():
            return LedgerSnapshot()

        try:
            document = simplejson.loads(text, use_decimal=True)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, oversized integers and runaway nesting alike
            raise CorruptSnapshotError(f"Ledger file is not valid JSON: {e}") from e

        # A literal `null` document is an empty ledger
        if document is None:
            return LedgerSnapshot()

        try:
            return LedgerSnapshot.model_validate(document)
        except ValidationError as e:
            raise CorruptSnapshotError(
                f"Ledger file does not match the ledger schema: {e.error_count()} errors"
            ) from e
        except (ValueError, RecursionError) as e:
            raise CorruptSnapshotError(f"Ledger file could not be parsed: {e}") from e

    async def _quarantine(self) -> None:
        """Move an unreadable file aside so the next save cannot destroy it."""
        stamp = utc_now().strftime("%Y%m%dT%H%M%S%fZ")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        try:
            await asyncio.to_thread(os.replace, self._path, target)
        except OSError as e:
            await self._audit.log(
                AuditEventBuilder.snapshot_load_failed(
                    str(self._path), f"Could not quarantine ledger file: {e}"
                )
            )
            return

        await self._audit.log(
            AuditEventBuilder.snapshot_quarantined(str(self._path), str(target))
        )

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    async def save(self, snapshot: LedgerSnapshot) -> bool:
        """Write the ledger atomically. Returns False if the write failed."""
        try:
            text = simplejson.dumps(
                snapshot.to_document(),
                indent=self._settings.json_indent or None,
                ensure_ascii=False,
                use_decimal=True,
                allow_nan=False,
            )
            await asyncio.to_thread(self._write_with_retry, text)
            return True
        except Exception as e:
            # Don't raise - the caller turns False into an explicit outcome
            await self._audit.log(
                AuditEventBuilder.snapshot_save_failed(str(self._path), str(e))
            )
            return False

    def _write_with_retry(self, text: str) -> None:
        wait = self._settings.write_retry_wait_seconds
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.write_retry_attempts),
            wait=wait_exponential(multiplier=wait, min=wait, max=wait * 8),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._write_text, text)
        except OSError as e:
            raise SnapshotWriteError(f"Failed to write ledger file: {e}") from e

    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")

        # Write atomically, cleaning up the temp file on failure
        try:
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, self._path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                tmp.unlink()
            raise
