"""Shared fixtures for the ledger tests.

Every test gets its own data directory under ``tmp_path`` so no test ever
touches the real ``~/SpendWiseData`` ledger, and write retries are
disabled so failure tests do not sleep.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from spendwise.audit import AuditLogger
from spendwise.config import LedgerSettings
from spendwise.models.ledger import (
    LedgerSnapshot,
    Transaction,
    TransactionType,
    User,
)
from spendwise.services.storage import JsonFileLedgerStorage


USER_ID = "user-1"
USER_NAME = "alice"


@pytest.fixture
def ledger_settings(tmp_path: Path) -> LedgerSettings:
    return LedgerSettings(
        data_dir=tmp_path / "SpendWiseData",
        write_retry_attempts=1,
        write_retry_wait_seconds=0,
    )


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def file_storage(ledger_settings: LedgerSettings, audit_logger: AuditLogger) -> JsonFileLedgerStorage:
    return JsonFileLedgerStorage(settings=ledger_settings, audit_logger=audit_logger)


def _make_transaction(
    amount: str,
    kind: TransactionType = TransactionType.CREDIT,
    user_id: str = USER_ID,
    is_cleared: bool = True,
    **extra,
) -> Transaction:
    return Transaction(
        amount=Decimal(amount),
        label=extra.pop("label", "test"),
        kind=kind,
        user_id=user_id,
        user_name=USER_NAME,
        is_cleared=is_cleared,
        **extra,
    )


@pytest.fixture
def sample_snapshot() -> LedgerSnapshot:
    return LedgerSnapshot(
        users=[User(id=USER_ID, name=USER_NAME, email="alice@example.com", password_hash="x")],
        transactions=[
            _make_transaction("100.50", label="salary", notes="march"),
            _make_transaction("20.25", TransactionType.DEBIT, label="food"),
            _make_transaction("40", TransactionType.DEBT, is_cleared=False, label="loan"),
        ],
    )


@pytest.fixture
def make_transaction():
    """Factory for transactions owned by the default test user."""
    return _make_transaction
