"""
Ledger Engine

Records transactions, computes balances and applies the debt policy.

Every operation loads the full snapshot from storage; there is no
long-lived in-memory ledger. Mutations run load-mutate-save while holding
the storage lock, so two coroutines cannot overwrite each other's changes.

DEBT POLICY:
- A user may carry at most one open (uncleared) debt. create_debt is
  BLOCKED while one exists.
- settle_debt clears one specific debt. Under BALANCE_CHECKED it refuses
  when the available balance is below the debt amount; under
  UNCONDITIONAL it clears any open debt it finds.
- auto_clear_debts walks open debts in record order (first recorded,
  first cleared) and clears each one that fits in the running balance.

Policy violations and save failures come back as LedgerOutcome values.
Invalid input (negative amounts) raises pydantic.ValidationError before
anything is loaded.
"""

from decimal import Decimal
from typing import Optional

from spendwise.audit import AuditLogger
from spendwise.config import get_settings
from spendwise.ledger import aggregates
from spendwise.models.audit import AuditEventBuilder
from spendwise.models.ledger import (
    DebtClearingReport,
    DebtSettlementPolicy,
    LedgerOutcome,
    Transaction,
    TransactionType,
    utc_now,
)
from spendwise.services.storage import LedgerStorageInterface


class LedgerEngine:
    """
    The ledger core used by the presentation layer.

    All amounts are Decimals. User ids are not checked against the
    registry: a transaction for an unknown user is simply recorded.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        settlement_policy: Optional[DebtSettlementPolicy] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._policy = settlement_policy or get_settings().ledger.settlement_policy
        self._audit = audit_logger or AuditLogger()

    @property
    def settlement_policy(self) -> DebtSettlementPolicy:
        return self._policy

    # =========================================================================
    # RECORDING
    # =========================================================================

    async def record_inflow(
        self,
        user_id: str,
        user_name: str,
        label: str,
        notes: Optional[str],
        amount: Decimal,
        kind: TransactionType = TransactionType.CREDIT,
    ) -> LedgerOutcome:
        """Record a cleared transaction of any kind (Credit by default)."""
        transaction = Transaction(
            amount=amount,
            label=label,
            notes=notes,
            kind=kind,
            user_id=user_id,
            user_name=user_name,
        )
        return await self._append(transaction)

    async def record_outflow(
        self,
        user_id: str,
        user_name: str,
        label: str,
        notes: Optional[str],
        amount: Decimal,
    ) -> LedgerOutcome:
        """Record a routine expense. It is settled on creation."""
        transaction = Transaction(
            amount=amount,
            label=label,
            notes=notes,
            kind=TransactionType.DEBIT,
            is_cleared=True,
            user_id=user_id,
            user_name=user_name,
        )
        return await self._append(transaction)

    async def _append(self, transaction: Transaction) -> LedgerOutcome:
        async with self._storage.lock:
            snapshot = await self._storage.load()
            snapshot.transactions.append(transaction)
            if not await self._storage.save(snapshot):
                return LedgerOutcome.SAVE_FAILED

        await self._audit.log(
            AuditEventBuilder.transaction_recorded(
                user_id=transaction.user_id,
                transaction_id=transaction.id,
                kind=transaction.kind.value,
                amount=transaction.amount,
                label=transaction.label,
            )
        )
        return LedgerOutcome.SUCCESS

    # =========================================================================
    # DEBTS
    # =========================================================================

    async def create_debt(
        self,
        user_id: str,
        user_name: str,
        amount: Decimal,
        label: str,
        notes: Optional[str],
    ) -> LedgerOutcome:
        """
        Open a new debt due one month from now.

        Returns BLOCKED if the user already has an open debt.
        """
        now = utc_now()
        debt = Transaction(
            amount=amount,
            label=label,
            notes=notes,
            kind=TransactionType.DEBT,
            timestamp=now,
            due_date=aggregates.add_months(now, 1),
            is_cleared=False,
            user_id=user_id,
            user_name=user_name,
        )

        async with self._storage.lock:
            snapshot = await self._storage.load()

            existing = aggregates.open_debts(snapshot, user_id)
            if existing:
                await self._audit.log(
                    AuditEventBuilder.debt_blocked(user_id, existing[0].id)
                )
                return LedgerOutcome.BLOCKED

            snapshot.transactions.append(debt)
            if not await self._storage.save(snapshot):
                return LedgerOutcome.SAVE_FAILED

        await self._audit.log(
            AuditEventBuilder.debt_created(user_id, debt.id, debt.amount, debt.due_date)
        )
        return LedgerOutcome.SUCCESS

    async def settle_debt(self, user_id: str, transaction_id: str) -> LedgerOutcome:
        """
        Clear one open debt of the user.

        Returns NOT_FOUND if there is no such open debt, and (under the
        BALANCE_CHECKED policy) INSUFFICIENT_FUNDS if the available balance
        is below the debt amount.
        """
        async with self._storage.lock:
            snapshot = await self._storage.load()

            debt = next(
                (
                    t for t in aggregates.open_debts(snapshot, user_id)
                    if t.id == transaction_id
                ),
                None,
            )
            if debt is None:
                await self._audit.log(
                    AuditEventBuilder.settlement_rejected(
                        user_id, transaction_id, "debt not found or already cleared"
                    )
                )
                return LedgerOutcome.NOT_FOUND

            if self._policy is DebtSettlementPolicy.BALANCE_CHECKED:
                available = aggregates.available_balance(snapshot, user_id)
                if available < debt.amount:
                    await self._audit.log(
                        AuditEventBuilder.settlement_rejected(
                            user_id,
                            transaction_id,
                            "insufficient funds",
                            {"available": str(available), "amount": str(debt.amount)},
                        )
                    )
                    return LedgerOutcome.INSUFFICIENT_FUNDS

            debt.is_cleared = True
            if not await self._storage.save(snapshot):
                return LedgerOutcome.SAVE_FAILED

        await self._audit.log(
            AuditEventBuilder.debt_settled(
                user_id, transaction_id, debt.amount, self._policy.value
            )
        )
        return LedgerOutcome.SUCCESS

    async def auto_clear_debts(self, user_id: str) -> DebtClearingReport:
        """
        Clear as many open debts as the available balance allows.

        Debts are taken in record order. Each debt that fits in the running
        balance is cleared and its amount subtracted; a debt that does not
        fit is skipped, and later (smaller) debts may still be cleared.
        """
        async with self._storage.lock:
            snapshot = await self._storage.load()

            starting = aggregates.available_balance(snapshot, user_id)
            running = starting
            cleared: list[str] = []
            outstanding: list[str] = []

            for debt in aggregates.open_debts(snapshot, user_id):
                if running >= debt.amount:
                    debt.is_cleared = True
                    running -= debt.amount
                    cleared.append(debt.id)
                else:
                    outstanding.append(debt.id)

            if cleared and not await self._storage.save(snapshot):
                return DebtClearingReport(
                    outcome=LedgerOutcome.SAVE_FAILED,
                    starting_balance=starting,
                    remaining_balance=starting,
                    outstanding_ids=cleared + outstanding,
                )

        if cleared:
            await self._audit.log(
                AuditEventBuilder.debts_auto_cleared(user_id, cleared, starting, running)
            )

        return DebtClearingReport(
            outcome=LedgerOutcome.SUCCESS,
            starting_balance=starting,
            remaining_balance=running,
            cleared_ids=cleared,
            outstanding_ids=outstanding,
        )

    # =========================================================================
    # AGGREGATES
    # =========================================================================

    async def total_inflow(self, user_id: str) -> Decimal:
        snapshot = await self._storage.load()
        return aggregates.total_inflow(snapshot, user_id)

    async def total_outflow(self, user_id: str) -> Decimal:
        snapshot = await self._storage.load()
        return aggregates.total_outflow(snapshot, user_id)

    async def total_debt(self, user_id: str) -> Decimal:
        snapshot = await self._storage.load()
        return aggregates.total_debt(snapshot, user_id)

    async def remaining_debt(self, user_id: str) -> Decimal:
        snapshot = await self._storage.load()
        return aggregates.remaining_debt(snapshot, user_id)

    async def available_balance(self, user_id: str) -> Decimal:
        """Spendable cash: cleared inflow minus cleared outflow."""
        snapshot = await self._storage.load()
        return aggregates.available_balance(snapshot, user_id)

    async def net_balance(self, user_id: str) -> Decimal:
        """Solvency: inflow minus outflow and outstanding debt."""
        snapshot = await self._storage.load()
        return aggregates.net_balance(snapshot, user_id)

    async def top_transactions(
        self,
        user_id: str,
        highest: bool,
        count: int = 5,
    ) -> list[Transaction]:
        snapshot = await self._storage.load()
        return aggregates.top_transactions(snapshot, user_id, highest, count)

    # =========================================================================
    # LISTINGS
    # =========================================================================

    async def list_inflows(self, user_id: str) -> list[Transaction]:
        snapshot = await self._storage.load()
        return aggregates.select(snapshot, user_id, TransactionType.CREDIT)

    async def list_outflows(self, user_id: str) -> list[Transaction]:
        snapshot = await self._storage.load()
        return aggregates.select(snapshot, user_id, TransactionType.DEBIT)

    async def list_debts(
        self,
        user_id: str,
        outstanding_only: bool = False,
    ) -> list[Transaction]:
        snapshot = await self._storage.load()
        if outstanding_only:
            return aggregates.open_debts(snapshot, user_id)
        return aggregates.select(snapshot, user_id, TransactionType.DEBT)
