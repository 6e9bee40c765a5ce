"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid ledger_group
or transaction_state is caught at the database level, not
just in Python validation.
"""

import enum


class LedgerGroup(str, enum.Enum):
    """
    Top-level chart-of-accounts categories.

    INCOME and REVENUE name the same economic category. Older
    data uses REVENUE, so both are accepted and reported.
    """
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


# Groups whose balance grows with debits. Everything else grows with credits.
NORMAL_DEBIT_GROUPS = frozenset({LedgerGroup.ASSET, LedgerGroup.EXPENSE})

INCOME_GROUPS = frozenset({LedgerGroup.INCOME, LedgerGroup.REVENUE})


class TransactionState(str, enum.Enum):
    """Direction of a ledger transaction."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    POSTED = "POSTED"
    REVERSED = "REVERSED"


# Statuses whose transactions move account balances. A reversed
# group stays counted because its offsetting group is posted too.
BALANCE_STATUSES = frozenset({TransactionStatus.POSTED, TransactionStatus.REVERSED})


class VoucherType(str, enum.Enum):
    PAYMENT = "PAYMENT"
    RECEIPT = "RECEIPT"
    DEPOSIT = "DEPOSIT"


class VoucherTo(str, enum.Enum):
    """Who the voucher pays or receives from."""
    CLIENT = "CLIENT"
    VENDOR = "VENDOR"
    STAFF = "STAFF"
    OTHER = "OTHER"


class VoucherStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    POSTED = "POSTED"
    CANCELLED = "CANCELLED"


class SourceType(str, enum.Enum):
    """Where a unified register line came from."""
    JOURNAL_ENTRY = "JOURNAL_ENTRY"
    PAYMENT = "PAYMENT"
    RECEIPT = "RECEIPT"


class OpenItemType(str, enum.Enum):
    """Outstanding documents that feed the aging reports."""
    INVOICE = "INVOICE"
    BILL = "BILL"


class AgingKind(str, enum.Enum):
    RECEIVABLES = "RECEIVABLES"
    PAYABLES = "PAYABLES"


AGING_KIND_TO_ITEM_TYPE = {
    AgingKind.RECEIVABLES: OpenItemType.INVOICE,
    AgingKind.PAYABLES: OpenItemType.BILL,
}


class CashFlowActivity(str, enum.Enum):
    """Section of the cash flow statement an account's movement is reported in."""
    OPERATING = "OPERATING"
    INVESTING = "INVESTING"
    FINANCING = "FINANCING"


# Used when an account does not name its activity. Fixed assets and
# borrowings are flagged on the account as INVESTING or FINANCING.
DEFAULT_CASH_FLOW_ACTIVITY = {
    LedgerGroup.ASSET: CashFlowActivity.OPERATING,
    LedgerGroup.LIABILITY: CashFlowActivity.OPERATING,
    LedgerGroup.EQUITY: CashFlowActivity.FINANCING,
    LedgerGroup.INCOME: CashFlowActivity.OPERATING,
    LedgerGroup.REVENUE: CashFlowActivity.OPERATING,
    LedgerGroup.EXPENSE: CashFlowActivity.OPERATING,
}
