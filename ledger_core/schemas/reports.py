"""
Report structures produced by the statement builders.

Plain data, no behaviour: they serialise straight to JSON or
go to whatever renders HTML/PDF. Amounts keep full Decimal
precision; display strings only appear in `formatted`, and
only when the caller injects a formatter.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from ledger_core.models.enums import AgingKind, CashFlowActivity, LedgerGroup
from ledger_core.schemas.diagnostics import DataQualityIssue, InvariantViolation
from ledger_core.schemas.ledger import LedgerAccountRecord


ZERO = Decimal("0")


# --- Chart of accounts ---

class AccountCategory(BaseModel):
    ledger_group: LedgerGroup
    accounts: list[LedgerAccountRecord]
    total: Decimal


class ChartOfAccounts(BaseModel):
    categories: list[AccountCategory] = Field(default_factory=list)
    unclassified: list[LedgerAccountRecord] = Field(default_factory=list)
    issues: list[DataQualityIssue] = Field(default_factory=list)

    def category(self, group: LedgerGroup) -> AccountCategory | None:
        for category in self.categories:
            if category.ledger_group == group:
                return category
        return None


# --- Trial balance ---

class TrialBalanceRow(BaseModel):
    account_id: str
    code: str
    name: str
    currency: str
    ledger_group: LedgerGroup | None
    ending_debit: Decimal = ZERO
    ending_credit: Decimal = ZERO
    marker: str | None = None


class TrialBalanceSection(BaseModel):
    ledger_group: LedgerGroup
    rows: list[TrialBalanceRow]
    total_debit: Decimal
    total_credit: Decimal


class TrialBalance(BaseModel):
    as_of: date
    sections: list[TrialBalanceSection] = Field(default_factory=list)
    unclassified: list[TrialBalanceRow] = Field(default_factory=list)
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO
    difference: Decimal = ZERO
    is_balanced: bool = True
    issues: list[DataQualityIssue] = Field(default_factory=list)
    violations: list[InvariantViolation] = Field(default_factory=list)
    formatted: dict[str, str] = Field(default_factory=dict)


# --- Profit & loss ---

class ProfitLossLine(BaseModel):
    account_id: str
    code: str
    name: str
    ledger_group: LedgerGroup | None
    amount: Decimal = ZERO
    marker: str | None = None


class ProfitLoss(BaseModel):
    period_start: date
    period_end: date
    income: list[ProfitLossLine] = Field(default_factory=list)
    expenses: list[ProfitLossLine] = Field(default_factory=list)
    unclassified: list[ProfitLossLine] = Field(default_factory=list)
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    issues: list[DataQualityIssue] = Field(default_factory=list)
    formatted: dict[str, str] = Field(default_factory=dict)


# --- Balance sheet ---

class BalanceSheetLine(BaseModel):
    account_id: str | None
    code: str | None
    name: str
    balance: Decimal = ZERO
    marker: str | None = None


class BalanceSheet(BaseModel):
    as_of: date
    assets: list[BalanceSheetLine] = Field(default_factory=list)
    liabilities: list[BalanceSheetLine] = Field(default_factory=list)
    equity: list[BalanceSheetLine] = Field(default_factory=list)
    unclassified: list[BalanceSheetLine] = Field(default_factory=list)
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    total_equity: Decimal = ZERO
    current_earnings: Decimal = ZERO
    difference: Decimal = ZERO
    is_balanced: bool = True
    issues: list[DataQualityIssue] = Field(default_factory=list)
    violations: list[InvariantViolation] = Field(default_factory=list)
    formatted: dict[str, str] = Field(default_factory=dict)


# --- Cash flow ---

class CashFlowLine(BaseModel):
    """
    One account's effect on cash over the period: positive when
    it brought cash in, negative when it used cash.
    """
    account_id: str
    code: str
    name: str
    ledger_group: LedgerGroup | None
    activity: CashFlowActivity | None
    amount: Decimal = ZERO
    marker: str | None = None


class CashFlowStatement(BaseModel):
    period_start: date
    period_end: date
    operating: list[CashFlowLine] = Field(default_factory=list)
    investing: list[CashFlowLine] = Field(default_factory=list)
    financing: list[CashFlowLine] = Field(default_factory=list)
    unclassified: list[CashFlowLine] = Field(default_factory=list)
    total_operating: Decimal = ZERO
    total_investing: Decimal = ZERO
    total_financing: Decimal = ZERO
    net_cash_flow: Decimal = ZERO
    opening_cash: Decimal = ZERO
    closing_cash: Decimal = ZERO
    # net_cash_flow minus the movement actually seen on cash accounts
    difference: Decimal = ZERO
    is_balanced: bool = True
    issues: list[DataQualityIssue] = Field(default_factory=list)
    violations: list[InvariantViolation] = Field(default_factory=list)
    formatted: dict[str, str] = Field(default_factory=dict)


# --- Aging ---

class OpenItemRecord(BaseModel):
    """An unpaid invoice or bill as the aging builder sees it."""
    id: str
    document_number: str | None = None
    entity_id: str | None = None
    entity_name: str | None = None
    due_date: date | None = None
    outstanding: Decimal = Field(allow_inf_nan=True)

    model_config = {"from_attributes": True}


class AgingBuckets(BaseModel):
    current: Decimal = ZERO
    days30: Decimal = ZERO
    days60: Decimal = ZERO
    days90: Decimal = ZERO
    over90: Decimal = ZERO
    total: Decimal = ZERO


class AgingItem(AgingBuckets):
    entity_id: str
    entity_name: str


class AgingReport(BaseModel):
    as_of: date
    kind: AgingKind
    items: list[AgingItem] = Field(default_factory=list)
    totals: AgingBuckets = Field(default_factory=AgingBuckets)
    issues: list[DataQualityIssue] = Field(default_factory=list)
    formatted: dict[str, str] = Field(default_factory=dict)
