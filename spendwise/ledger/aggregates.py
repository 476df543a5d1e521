"""
Ledger Aggregates

Pure functions over a LedgerSnapshot. They never touch storage, so the
engine can call them while holding the storage lock.

Definitions:
- inflow:             sum of Credit amounts
- outflow:            sum of Debit amounts
- total debt:         sum of Debt amounts, cleared or not
- remaining debt:     sum of uncleared Debt amounts
- available balance:  cleared Credit minus cleared Debit (debts excluded)
- net balance:        inflow minus (outflow plus remaining debt)
"""

import calendar
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from spendwise.models.ledger import LedgerSnapshot, Transaction, TransactionType


ZERO = Decimal("0")


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def select(
    snapshot: LedgerSnapshot,
    user_id: str,
    kind: Optional[TransactionType] = None,
    cleared: Optional[bool] = None,
) -> list[Transaction]:
    """
    Transactions of one user in record order, optionally filtered by kind
    and cleared flag.
    """
    return [
        t for t in snapshot.transactions
        if t.belongs_to(user_id)
        and (kind is None or t.kind is kind)
        and (cleared is None or t.is_cleared is cleared)
    ]


def total_inflow(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    return sum_amounts(select(snapshot, user_id, TransactionType.CREDIT))


def total_outflow(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    return sum_amounts(select(snapshot, user_id, TransactionType.DEBIT))


def total_debt(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    return sum_amounts(select(snapshot, user_id, TransactionType.DEBT))


def open_debts(snapshot: LedgerSnapshot, user_id: str) -> list[Transaction]:
    return select(snapshot, user_id, TransactionType.DEBT, cleared=False)


def remaining_debt(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    return sum_amounts(open_debts(snapshot, user_id))


def available_balance(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    cleared_in = sum_amounts(select(snapshot, user_id, TransactionType.CREDIT, cleared=True))
    cleared_out = sum_amounts(select(snapshot, user_id, TransactionType.DEBIT, cleared=True))
    return cleared_in - cleared_out


def net_balance(snapshot: LedgerSnapshot, user_id: str) -> Decimal:
    return total_inflow(snapshot, user_id) - (
        total_outflow(snapshot, user_id) + remaining_debt(snapshot, user_id)
    )


def top_transactions(
    snapshot: LedgerSnapshot,
    user_id: str,
    highest: bool,
    count: int = 5,
) -> list[Transaction]:
    """
    The `count` largest (or smallest) transactions of a user.

    sorted() is stable, also with reverse=True, so equal amounts keep
    their record order.
    """
    if count <= 0:
        return []
    ranked = sorted(select(snapshot, user_id), key=lambda t: t.amount, reverse=highest)
    return ranked[:count]


def add_months(moment: datetime, months: int) -> datetime:
    """
    Same day and time `months` later, clamped to the last day of the month
    (Jan 31 + 1 month is Feb 28/29).
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
