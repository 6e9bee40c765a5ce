"""
Pydantic schemas for ledger operations.

Three kinds of schema live here:
- requests: what API clients send (validated strictly)
- records: what the store hands to the engine (lenient, so
  the engine can report bad rows instead of the parser
  rejecting the whole batch)
- responses and filters
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from ledger_core.models.enums import (
    CashFlowActivity,
    LedgerGroup,
    TransactionState,
    TransactionStatus,
)


def parse_ledger_group(raw) -> LedgerGroup | None:
    """Map a stored group name to LedgerGroup; unknown names map to None."""
    if raw is None:
        return None
    if isinstance(raw, LedgerGroup):
        return raw
    value = raw.value if isinstance(raw, enum.Enum) else str(raw)
    try:
        return LedgerGroup(value.strip().upper())
    except ValueError:
        return None


def _raw_status(raw) -> str | None:
    if isinstance(raw, enum.Enum):
        return raw.value
    return raw


# --- Request Schemas ---

class LedgerAccountCreate(BaseModel):
    """Request to create a new ledger account."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    ledger_group: LedgerGroup
    parent_account_id: str | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    is_cash: bool = False
    cash_flow_activity: CashFlowActivity | None = None


class LedgerAccountUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    ledger_group: LedgerGroup | None = None
    parent_account_id: str | None = None
    is_active: bool | None = None
    is_cash: bool | None = None
    cash_flow_activity: CashFlowActivity | None = None


class JournalEntryLineCreate(BaseModel):
    """One line of a journal entry. Exactly one side carries the amount."""
    account_id: str
    debit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    credit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)
    description: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def exactly_one_side(self):
        if (self.debit_amount > 0) == (self.credit_amount > 0):
            raise ValueError(
                "each line must have either a debit or a credit amount, not both"
            )
        return self


class JournalEntryCreate(BaseModel):
    """
    A complete journal entry: a group of lines that must
    balance before it can be posted.

    Retrying with the same reference returns the existing
    entry instead of creating a duplicate.
    """
    entry_date: date
    description: str = Field(min_length=1, max_length=255)
    reference: str | None = Field(default=None, max_length=50)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    lines: list[JournalEntryLineCreate] = Field(min_length=2)
    post: bool = False

    @field_validator("lines")
    @classmethod
    def must_have_debits_and_credits(cls, v: list) -> list:
        has_debit = any(line.debit_amount > 0 for line in v)
        has_credit = any(line.credit_amount > 0 for line in v)
        if not (has_debit and has_credit):
            raise ValueError(
                "journal entry must contain at least one debit and one credit"
            )
        return v


# --- Filters ---

class AccountFilter(BaseModel):
    """
    Which accounts to fetch and the window their balances cover.

    from_date=None means "since the beginning of the books",
    which is what the balance sheet and trial balance want.
    """
    as_of: date | None = None
    from_date: date | None = None
    active_only: bool = False
    ledger_groups: list[LedgerGroup] | None = None


class TransactionFilter(BaseModel):
    from_date: date | None = None
    to_date: date | None = None
    status: str | None = None
    max: int = Field(default=500, ge=1, le=5000)


# --- Records consumed by the engine ---

class LedgerAccountRecord(BaseModel):
    """
    A chart-of-accounts row as the engine sees it.

    balance is signed in the account's normal direction:
    debits - credits for ASSET and EXPENSE, credits - debits
    for everything else.
    """
    id: str
    code: str
    name: str
    ledger_group: LedgerGroup | None = None
    parent_account_id: str | None = None
    currency: str = "USD"
    is_active: bool = True
    is_cash: bool = False
    cash_flow_activity: CashFlowActivity | None = None
    balance: Decimal = Field(default=Decimal("0"), allow_inf_nan=True)

    model_config = {"from_attributes": True}

    @field_validator("ledger_group", mode="before")
    @classmethod
    def lenient_ledger_group(cls, v):
        return parse_ledger_group(v)


class LedgerTransactionRecord(BaseModel):
    id: str
    transaction_date: date | None = None
    description: str | None = None
    amount: Decimal = Field(allow_inf_nan=True)
    transaction_state: TransactionState | None = None
    ledger_account_id: str | None = None
    status: str | None = None
    group_id: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("status", mode="before")
    @classmethod
    def raw_status(cls, v):
        return _raw_status(v)


class LedgerTransactionGroupRecord(BaseModel):
    id: str
    group_date: date | None = None
    description: str | None = None
    reference: str | None = None
    status: str | None = None
    transactions: list[LedgerTransactionRecord] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("status", mode="before")
    @classmethod
    def raw_status(cls, v):
        return _raw_status(v)

    @computed_field
    @property
    def total_debit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions
             if t.transaction_state == TransactionState.DEBIT),
            Decimal("0"),
        )

    @computed_field
    @property
    def total_credit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions
             if t.transaction_state == TransactionState.CREDIT),
            Decimal("0"),
        )


# --- Response Schemas ---

class LedgerAccountResponse(BaseModel):
    """Ledger account in API responses."""
    id: str
    code: str
    name: str
    ledger_group: LedgerGroup
    parent_account_id: str | None
    currency: str
    is_active: bool
    is_cash: bool
    cash_flow_activity: CashFlowActivity | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """Response for an account balance query."""
    account_id: str
    account_code: str
    ledger_group: LedgerGroup
    balance: Decimal
    currency: str


class IntegrityReport(BaseModel):
    """Ledger-wide debit/credit check over balance-moving transactions."""
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool
    unbalanced_group_ids: list[str] = Field(default_factory=list)


class LedgerTransactionResponse(BaseModel):
    id: str
    transaction_date: date
    description: str
    amount: Decimal
    transaction_state: TransactionState
    ledger_account_id: str
    status: TransactionStatus
    group_id: str | None = None
    voucher_id: str | None = None

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    """A journal entry group with its lines and totals."""
    id: str
    group_date: date
    description: str
    reference: str | None
    status: TransactionStatus
    reversal_of_id: str | None
    posted_at: datetime | None
    transactions: list[LedgerTransactionResponse]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool

    model_config = {"from_attributes": True}
