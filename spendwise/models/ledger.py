"""
Core Data Models for the SpendWise Ledger

These models define the persisted shape of the ledger and the results
returned by the engine. They are designed to:
1. Enforce type safety at runtime
2. Keep money arithmetic exact (Decimal, never float)
3. Serialize to the durable Data.json layout (PascalCase field names)
4. Read that layout back tolerantly (case-insensitive field names)

DESIGN DECISION: The whole ledger is one LedgerSnapshot. It is loaded,
mutated and saved as a unit; there is no per-record persistence.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_identifier() -> str:
    return str(uuid4())


# Amounts are exact, finite Decimals in memory and exact JSON numbers on disk.
Money = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Kind of a ledger transaction.

    The values are the literal names written to Data.json.
    """
    CREDIT = "Credit"
    DEBIT = "Debit"
    DEBT = "Debt"


# Older data files store the kind as its ordinal.
_TRANSACTION_TYPE_ORDINALS = {
    0: TransactionType.CREDIT,
    1: TransactionType.DEBIT,
    2: TransactionType.DEBT,
}


class LedgerOutcome(str, Enum):
    """
    Result of a registry or engine mutation.

    Policy violations and persistence failures are reported through
    this enum. They are never raised.
    """
    SUCCESS = "success"
    DUPLICATE = "duplicate"                      # user name already taken
    BLOCKED = "blocked"                          # an open debt already exists
    NOT_FOUND = "not_found"                      # no such uncleared debt
    INSUFFICIENT_FUNDS = "insufficient_funds"    # available balance too low
    SAVE_FAILED = "save_failed"                  # snapshot could not be written

    @property
    def ok(self) -> bool:
        return self is LedgerOutcome.SUCCESS


class DebtSettlementPolicy(str, Enum):
    """
    How settle_debt treats the available balance.

    BALANCE_CHECKED refuses to clear a debt larger than the available
    balance. UNCONDITIONAL clears any open debt that is found.
    """
    BALANCE_CHECKED = "balance_checked"
    UNCONDITIONAL = "unconditional"


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """
    Base for everything stored in Data.json.

    Field names are matched case-insensitively on read so that hand-edited
    files ("userid", "AMOUNT") still load. Unknown keys are ignored.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def match_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        canonical: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            key = field.alias or name
            canonical[name.casefold()] = key
            canonical[key.casefold()] = key

        return {
            canonical.get(str(key).casefold(), key): value
            for key, value in data.items()
        }


class User(LedgerRecord):
    """
    A registered ledger user.

    Created once at registration and never mutated afterwards.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_identifier,
        alias="UserId",
        description="Opaque unique identifier"
    )
    name: str = Field(
        ...,
        alias="UserName",
        min_length=1,
        max_length=100,
        description="Display name, unique case-insensitively"
    )
    email: str = Field(
        default="",
        alias="Email",
        description="Email address (format checked by the caller)"
    )
    password_hash: str = Field(
        ...,
        alias="Password",
        description="Encoded salt and derived key, never the plaintext"
    )

    def has_name(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.casefold() == name.strip().casefold()


class Transaction(LedgerRecord):
    """
    A single ledger entry.

    The sign of its contribution to a balance comes from `kind`; the amount
    itself is never negative.
    """

    id: str = Field(
        default_factory=new_identifier,
        alias="TransactionId",
    )
    amount: Money = Field(..., alias="Amount")
    label: str = Field(..., alias="Label")
    notes: Optional[str] = Field(default=None, alias="Notes")
    kind: TransactionType = Field(..., alias="TransactionType")
    timestamp: datetime = Field(
        default_factory=utc_now,
        alias="TransactionDateTime",
    )
    user_id: str = Field(..., alias="UserId")
    user_name: str = Field(default="", alias="UserName")
    due_date: Optional[datetime] = Field(
        default=None,
        alias="DueDate",
        description="Repayment date, only meaningful for debts"
    )
    is_cleared: bool = Field(default=True, alias="IsCleared")

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> Any:
        """Accept ordinals and any casing of the kind name."""
        if isinstance(v, int) and not isinstance(v, bool):
            return _TRANSACTION_TYPE_ORDINALS.get(v, v)
        if isinstance(v, str):
            for kind in TransactionType:
                if kind.value.casefold() == v.strip().casefold():
                    return kind
        return v

    @field_validator("timestamp", "due_date")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Naive datetimes in the file are UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def is_open_debt(self) -> bool:
        return self.kind is TransactionType.DEBT and not self.is_cleared

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id == user_id


class LedgerSnapshot(LedgerRecord):
    """
    The complete ledger at one point in time: the unit of persistence.
    """

    users: list[User] = Field(default_factory=list, alias="Users")
    transactions: list[Transaction] = Field(
        default_factory=list,
        alias="Transactions",
    )

    def to_document(self) -> dict:
        """
        Convert to the JSON document written to disk.

        Optional fields without a value are omitted, not written as null.
        Amounts stay Decimal so the encoder can write them as exact numbers.
        """
        document = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for entry, transaction in zip(document["Transactions"], self.transactions):
            entry["Amount"] = transaction.amount
        return document

    def find_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_user_by_name(self, name: str) -> Optional[User]:
        return next((u for u in self.users if u.has_name(name)), None)

    def transactions_for(self, user_id: str) -> list[Transaction]:
        """All transactions of a user, in record order."""
        return [t for t in self.transactions if t.belongs_to(user_id)]


# =============================================================================
# ENGINE RESULTS
# =============================================================================

class DebtClearingReport(BaseModel):
    """
    Result of an automatic debt-clearing pass.

    Debts are visited in record order; each one that fits in the running
    balance is cleared and subtracted from it.
    """

    outcome: LedgerOutcome
    starting_balance: Decimal
    remaining_balance: Decimal
    cleared_ids: list[str] = Field(default_factory=list)
    outstanding_ids: list[str] = Field(default_factory=list)

    @property
    def cleared_count(self) -> int:
        return len(self.cleared_ids)
