"""
Application Wiring for the SpendWise Ledger

This module builds the components the presentation layer talks to:
1. AccountRegistry (register, authenticate, look up users)
2. LedgerEngine (record, settle, aggregate)

DESIGN DECISION: Both components share ONE storage instance. The storage
lock is what serializes load-mutate-save cycles, so handing each
component its own storage for the same file would reintroduce lost
updates between them.
"""

from dataclasses import dataclass
from typing import Optional

from spendwise.accounts import AccountRegistry
from spendwise.audit import AuditLogger
from spendwise.config import LedgerSettings, get_settings
from spendwise.ledger import LedgerEngine
from spendwise.services.credentials import PasswordHasher
from spendwise.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
)


@dataclass
class AppComponents:
    """Everything the presentation layer needs, sharing one storage."""

    storage: LedgerStorageInterface
    registry: AccountRegistry
    engine: LedgerEngine
    audit_logger: AuditLogger


def create_app_components(
    settings: Optional[LedgerSettings] = None,
    use_file_storage: bool = True,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Ledger settings. Loaded from the environment if None.
        use_file_storage: Whether to persist to the JSON ledger file.
                          Set to False for an in-memory ledger.

    Returns:
        AppComponents wired to a single shared storage
    """
    settings = settings or get_settings().ledger
    audit_logger = AuditLogger()

    if use_file_storage:
        storage: LedgerStorageInterface = JsonFileLedgerStorage(
            settings=settings,
            audit_logger=audit_logger,
        )
    else:
        storage = InMemoryLedgerStorage()

    registry = AccountRegistry(
        storage=storage,
        hasher=PasswordHasher(),
        audit_logger=audit_logger,
    )
    engine = LedgerEngine(
        storage=storage,
        settlement_policy=settings.settlement_policy,
        audit_logger=audit_logger,
    )

    return AppComponents(
        storage=storage,
        registry=registry,
        engine=engine,
        audit_logger=audit_logger,
    )
