"""
Data Models Package

This package contains all Pydantic models used by the SpendWise ledger.
All data read from or written to the ledger file conforms to these schemas.
"""

from spendwise.models.ledger import (
    DebtClearingReport,
    DebtSettlementPolicy,
    LedgerOutcome,
    LedgerSnapshot,
    Transaction,
    TransactionType,
    User,
)
from spendwise.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DebtClearingReport",
    "DebtSettlementPolicy",
    "LedgerOutcome",
    "LedgerSnapshot",
    "Transaction",
    "TransactionType",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
