"""
Audit Models for the SpendWise Ledger

Every mutation of the ledger and every refused operation is described
by an AuditEvent. This provides:
1. Traceability of balance changes
2. Debugging information when a save or load fails
3. A record of policy rejections (blocked debts, insufficient funds)

DESIGN DECISION: Audit events go to the structured log only. They are
never written into the ledger file, which stays a pure data document.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from spendwise.models.ledger import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"

    # Transactions
    TRANSACTION_RECORDED = "transaction_recorded"
    DEBT_CREATED = "debt_created"
    DEBT_BLOCKED = "debt_blocked"
    DEBT_SETTLED = "debt_settled"
    SETTLEMENT_REJECTED = "settlement_rejected"
    DEBTS_AUTO_CLEARED = "debts_auto_cleared"

    # Persistence
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"
    SNAPSHOT_QUARANTINED = "snapshot_quarantined"
    SNAPSHOT_SAVE_FAILED = "snapshot_save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction', 'snapshot')"
    )
    entity_id: Optional[str] = None
    user_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.debt_created(user_id, transaction_id, amount)
        event = AuditEventBuilder.snapshot_save_failed(path, error)
    """

    @staticmethod
    def user_registered(user_id: str, user_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"User registered: {user_name}",
            details={"user_name": user_name},
        )

    @staticmethod
    def registration_rejected(user_name: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description=f"Registration rejected for {user_name}: {reason}",
            details={"user_name": user_name, "reason": reason},
        )

    @staticmethod
    def transaction_recorded(
        user_id: str,
        transaction_id: str,
        kind: str,
        amount: Decimal,
        label: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            description=f"{kind} recorded: {label} {amount}",
            details={"kind": kind, "amount": str(amount), "label": label},
        )

    @staticmethod
    def debt_created(
        user_id: str,
        transaction_id: str,
        amount: Decimal,
        due_date: datetime,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            description=f"Debt of {amount} created, due {due_date.date().isoformat()}",
            details={"amount": str(amount), "due_date": due_date.isoformat()},
        )

    @staticmethod
    def debt_blocked(user_id: str, open_debt_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=open_debt_id,
            user_id=user_id,
            description="Cannot create new debt until the existing debt is cleared",
        )

    @staticmethod
    def debt_settled(
        user_id: str,
        transaction_id: str,
        amount: Decimal,
        policy: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_SETTLED,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            description=f"Debt of {amount} settled",
            details={"amount": str(amount), "policy": policy},
        )

    @staticmethod
    def settlement_rejected(
        user_id: str,
        transaction_id: str,
        reason: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            description=f"Debt settlement rejected: {reason}",
            details={"reason": reason, **(details or {})},
        )

    @staticmethod
    def debts_auto_cleared(
        user_id: str,
        cleared_ids: list[str],
        starting_balance: Decimal,
        remaining_balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBTS_AUTO_CLEARED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"Automatically cleared {len(cleared_ids)} debts",
            details={
                "cleared_ids": cleared_ids,
                "starting_balance": str(starting_balance),
                "remaining_balance": str(remaining_balance),
            },
        )

    @staticmethod
    def snapshot_load_failed(location: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            description="Ledger file unreadable, continuing with an empty ledger",
            error_message=error_message,
            details={"location": location},
        )

    @staticmethod
    def snapshot_quarantined(location: str, quarantined_to: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_QUARANTINED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            description="Unreadable ledger file moved aside",
            details={"location": location, "quarantined_to": quarantined_to},
        )

    @staticmethod
    def snapshot_save_failed(location: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            description="Ledger file could not be written",
            error_message=error_message,
            details={"location": location},
        )
