"""
Tests for the SpendWise ledger models

Test strategy:
1. Unit tests for individual components (models, hasher, aggregates)
2. Integration tests for flows against real temp files or memory storage
3. No test touches the user's real data directory
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from spendwise.models.ledger import (
    DebtClearingReport,
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


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_defaults(self):
        """New transactions get an id, a UTC timestamp and are cleared."""
        tx = Transaction(
            amount=Decimal("12.50"),
            label="food",
            kind=TransactionType.DEBIT,
            user_id="u1",
        )
        assert tx.id
        assert tx.timestamp.tzinfo is not None
        assert tx.is_cleared is True
        assert tx.due_date is None
        assert tx.notes is None

    def test_transaction_ids_are_unique(self):
        """Two transactions never share an id."""
        a = Transaction(amount=1, label="a", kind="Credit", user_id="u1")
        b = Transaction(amount=1, label="a", kind="Credit", user_id="u1")
        assert a.id != b.id

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal("-1"),
                label="x",
                kind=TransactionType.DEBIT,
                user_id="u1",
            )

    @pytest.mark.parametrize("amount", ["Infinity", "NaN"])
    def test_transaction_rejects_non_finite_amount(self, amount):
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal(amount),
                label="x",
                kind=TransactionType.CREDIT,
                user_id="u1",
            )

    def test_transaction_kind_is_case_insensitive(self):
        """Kind names in any casing map to the enum."""
        tx = Transaction(amount=1, label="x", kind="debt", user_id="u1")
        assert tx.kind is TransactionType.DEBT

    def test_transaction_kind_accepts_ordinals(self):
        """Files written with numeric kinds still load."""
        tx = Transaction.model_validate(
            {"Amount": 5, "Label": "x", "TransactionType": 1, "UserId": "u1"}
        )
        assert tx.kind is TransactionType.DEBIT

    def test_transaction_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Transaction(amount=1, label="x", kind="Transfer", user_id="u1")

    def test_naive_datetimes_are_utc(self):
        """A timestamp without zone info is read as UTC."""
        tx = Transaction.model_validate(
            {
                "Amount": 5,
                "Label": "x",
                "TransactionType": "Credit",
                "UserId": "u1",
                "TransactionDateTime": "2024-03-01T10:00:00",
            }
        )
        assert tx.timestamp == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_is_open_debt(self):
        debt = Transaction(amount=1, label="x", kind="Debt", user_id="u1", is_cleared=False)
        cleared = Transaction(amount=1, label="x", kind="Debt", user_id="u1")
        debit = Transaction(amount=1, label="x", kind="Debit", user_id="u1", is_cleared=False)
        assert debt.is_open_debt is True
        assert cleared.is_open_debt is False
        assert debit.is_open_debt is False


class TestUserModel:
    """Tests for the User model."""

    def test_user_creation(self):
        user = User(name="Alice", email="alice@example.com", password_hash="abc")
        assert user.id
        assert user.name == "Alice"

    def test_user_name_strips_whitespace(self):
        user = User(name="  Alice  ", password_hash="abc")
        assert user.name == "Alice"

    def test_user_name_required(self):
        with pytest.raises(ValidationError):
            User(name="   ", password_hash="abc")

    def test_user_name_max_length(self):
        User(name="a" * 100, password_hash="abc")
        with pytest.raises(ValidationError):
            User(name="a" * 101, password_hash="abc")

    def test_has_name_is_case_insensitive(self):
        user = User(name="Alice", password_hash="abc")
        assert user.has_name("ALICE")
        assert user.has_name(" alice ")
        assert not user.has_name("alicia")


class TestLedgerSnapshot:
    """Tests for the persisted document layout."""

    def test_empty_snapshot(self):
        snapshot = LedgerSnapshot()
        assert snapshot.users == []
        assert snapshot.transactions == []

    def test_document_uses_pascal_case(self, sample_snapshot):
        document = sample_snapshot.to_document()
        assert set(document) == {"Users", "Transactions"}
        assert set(document["Users"][0]) == {"UserId", "UserName", "Email", "Password"}
        assert document["Transactions"][0]["TransactionType"] == "Credit"
        assert document["Transactions"][0]["Amount"] == Decimal("100.50")
        assert document["Transactions"][0]["Notes"] == "march"

    def test_document_omits_absent_optional_fields(self, sample_snapshot):
        debit = sample_snapshot.to_document()["Transactions"][1]
        assert "Notes" not in debit
        assert "DueDate" not in debit
        assert debit["IsCleared"] is True

    def test_field_names_are_case_insensitive(self):
        snapshot = LedgerSnapshot.model_validate(
            {
                "users": [{"userid": "u1", "USERNAME": "bob", "email": "", "password": "h"}],
                "TRANSACTIONS": [
                    {
                        "transactionid": "t1",
                        "amount": "3.10",
                        "label": "tea",
                        "transactiontype": "Debit",
                        "userid": "u1",
                        "iscleared": True,
                    }
                ],
            }
        )
        assert snapshot.users[0].name == "bob"
        assert snapshot.transactions[0].id == "t1"
        assert snapshot.transactions[0].amount == Decimal("3.10")

    def test_unknown_fields_are_ignored(self):
        snapshot = LedgerSnapshot.model_validate({"Users": [], "Transactions": [], "Version": 2})
        assert snapshot.transactions == []

    def test_find_user_by_name(self, sample_snapshot):
        assert sample_snapshot.find_user_by_name("ALICE").id == "user-1"
        assert sample_snapshot.find_user_by_name("bob") is None

    def test_transactions_for(self, sample_snapshot):
        assert len(sample_snapshot.transactions_for("user-1")) == 3
        assert sample_snapshot.transactions_for("someone-else") == []


class TestOutcomes:
    """Tests for engine result types."""

    def test_only_success_is_ok(self):
        assert LedgerOutcome.SUCCESS.ok
        for outcome in LedgerOutcome:
            if outcome is not LedgerOutcome.SUCCESS:
                assert not outcome.ok

    def test_clearing_report_counts(self):
        report = DebtClearingReport(
            outcome=LedgerOutcome.SUCCESS,
            starting_balance=Decimal("90"),
            remaining_balance=Decimal("10"),
            cleared_ids=["a", "b"],
            outstanding_ids=["c"],
        )
        assert report.cleared_count == 2


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.DEBT_CREATED,
            description="Debt created",
        )
        assert event.event_type == AuditEventType.DEBT_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.transaction_recorded(
            user_id="u1",
            transaction_id="t1",
            kind="Credit",
            amount=Decimal("10.00"),
            label="salary",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_recorded"
        assert log_dict["details"]["amount"] == "10.00"
        assert log_dict["user_id"] == "u1"

    def test_rejections_are_warnings(self):
        assert AuditEventBuilder.debt_blocked("u1", "t1").severity == AuditSeverity.WARNING
        assert (
            AuditEventBuilder.settlement_rejected("u1", "t1", "insufficient funds").severity
            == AuditSeverity.WARNING
        )

    def test_save_failure_is_error(self):
        event = AuditEventBuilder.snapshot_save_failed("/tmp/Data.json", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
