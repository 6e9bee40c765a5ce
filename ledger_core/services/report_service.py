"""
Report service: fetches account balances for the requested
window and runs the statement builders over them.
"""

from collections.abc import Callable
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from ledger_core.engine.aging import build_aging_report
from ledger_core.engine.formatting import currency_formatter
from ledger_core.engine.numeric import ZERO
from ledger_core.engine.statements import (
    DEFAULT_TOLERANCE,
    build_balance_sheet,
    build_cash_flow,
    build_profit_and_loss,
    build_trial_balance,
    cash_effect,
)
from ledger_core.models.enums import AgingKind, LedgerGroup
from ledger_core.schemas.ledger import AccountFilter
from ledger_core.schemas.reports import (
    AgingReport,
    BalanceSheet,
    CashFlowStatement,
    ProfitLoss,
    TrialBalance,
)
from ledger_core.services.ledger_service import LedgerService
from ledger_core.services.open_item_service import OpenItemService


def _formatter(currency: str | None) -> Callable[[Decimal], str] | None:
    if currency is None:
        return None
    return currency_formatter(currency)


class ReportService:

    def __init__(self, db: Session, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.db = db
        self.tolerance = tolerance
        self.ledger_service = LedgerService(db)
        self.open_item_service = OpenItemService(db)

    def trial_balance(self, as_of: date, currency: str | None = None) -> TrialBalance:
        accounts = self.ledger_service.fetch_accounts(AccountFilter(as_of=as_of))
        return build_trial_balance(
            accounts, as_of, self.tolerance, format_currency=_formatter(currency)
        )

    def profit_and_loss(
        self, period_start: date, period_end: date, currency: str | None = None
    ) -> ProfitLoss:
        """Income and expense balances moved within [period_start, period_end]."""
        if period_start > period_end:
            raise ValueError(
                f"Period start {period_start} is after period end {period_end}"
            )
        accounts = self.ledger_service.fetch_accounts(AccountFilter(
            from_date=period_start,
            as_of=period_end,
            ledger_groups=[LedgerGroup.INCOME, LedgerGroup.REVENUE, LedgerGroup.EXPENSE],
        ))
        return build_profit_and_loss(
            accounts, period_start, period_end, format_currency=_formatter(currency)
        )

    def balance_sheet(
        self,
        as_of: date,
        include_current_earnings: bool = True,
        currency: str | None = None,
    ) -> BalanceSheet:
        accounts = self.ledger_service.fetch_accounts(AccountFilter(as_of=as_of))
        return build_balance_sheet(
            accounts,
            as_of,
            self.tolerance,
            include_current_earnings=include_current_earnings,
            format_currency=_formatter(currency),
        )

    def aging(self, kind: AgingKind, as_of: date, currency: str | None = None) -> AgingReport:
        items = self.open_item_service.fetch_open_items(kind, as_of)
        return build_aging_report(items, as_of, kind, format_currency=_formatter(currency))

    def cash_flow(
        self, period_start: date, period_end: date, currency: str | None = None
    ) -> CashFlowStatement:
        """
        Cash movements within [period_start, period_end], with the
        cash held at the close of the day before period_start as the
        opening balance.
        """
        if period_start > period_end:
            raise ValueError(
                f"Period start {period_start} is after period end {period_end}"
            )
        movements = self.ledger_service.fetch_accounts(AccountFilter(
            from_date=period_start, as_of=period_end,
        ))
        before = self.ledger_service.fetch_accounts(AccountFilter(
            as_of=period_start - timedelta(days=1),
        ))
        opening_cash = sum(
            (-cash_effect(a.ledger_group, a.balance) for a in before if a.is_cash),
            ZERO,
        )
        return build_cash_flow(
            movements,
            period_start,
            period_end,
            opening_cash=opening_cash,
            tolerance=self.tolerance,
            format_currency=_formatter(currency),
        )
