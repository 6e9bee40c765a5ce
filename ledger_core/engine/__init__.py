"""
Pure ledger computations.

Nothing in this package opens a session or writes anything.
Inputs are fully materialised records; outputs are pydantic
report objects.
"""

from ledger_core.engine.aggregator import AccountIndex, group_accounts
from ledger_core.engine.aging import build_aging_report, classify_open_item
from ledger_core.engine.formatting import currency_formatter, format_currency
from ledger_core.engine.statements import (
    build_balance_sheet,
    build_cash_flow,
    build_profit_and_loss,
    build_trial_balance,
)
from ledger_core.engine.status import normalize_status
from ledger_core.engine.unifier import unify_transactions

__all__ = [
    "AccountIndex",
    "group_accounts",
    "build_aging_report",
    "classify_open_item",
    "currency_formatter",
    "format_currency",
    "build_balance_sheet",
    "build_cash_flow",
    "build_profit_and_loss",
    "build_trial_balance",
    "normalize_status",
    "unify_transactions",
]
