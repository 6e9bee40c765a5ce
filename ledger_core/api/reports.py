"""
Financial report endpoints.

Every report accepts an optional `currency` code. When given,
the report's `formatted` field carries display strings for its
totals in that currency; the numeric fields are unaffected.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger_core.api.errors import to_http_error
from ledger_core.config import get_settings
from ledger_core.errors import MalformedInputError
from ledger_core.models.base import get_db
from ledger_core.models.enums import AgingKind
from ledger_core.services.report_service import ReportService
from ledger_core.schemas.reports import (
    AgingReport,
    BalanceSheet,
    CashFlowStatement,
    ProfitLoss,
    TrialBalance,
)

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db, tolerance=get_settings().BALANCE_TOLERANCE)


@router.get("/trial-balance", response_model=TrialBalance)
def trial_balance(
    as_of: date | None = None,
    currency: str | None = None,
    service: ReportService = Depends(get_report_service),
):
    """Ending debit and credit per account. as_of defaults to today."""
    try:
        return service.trial_balance(as_of or date.today(), currency)
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)


@router.get("/profit-loss", response_model=ProfitLoss)
def profit_and_loss(
    period_start: date,
    period_end: date,
    currency: str | None = None,
    service: ReportService = Depends(get_report_service),
):
    try:
        return service.profit_and_loss(period_start, period_end, currency)
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)


@router.get("/balance-sheet", response_model=BalanceSheet)
def balance_sheet(
    as_of: date | None = None,
    include_current_earnings: bool = True,
    currency: str | None = None,
    service: ReportService = Depends(get_report_service),
):
    """
    Assets, liabilities and equity at a date.

    A non-zero `difference` means the books do not balance; it is
    reported, never hidden.
    """
    try:
        return service.balance_sheet(
            as_of or date.today(), include_current_earnings, currency
        )
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)


@router.get("/cash-flow", response_model=CashFlowStatement)
def cash_flow(
    period_start: date,
    period_end: date,
    currency: str | None = None,
    service: ReportService = Depends(get_report_service),
):
    """
    Operating, investing and financing cash flows for a period,
    reconciled against the accounts flagged as cash.
    """
    try:
        return service.cash_flow(period_start, period_end, currency)
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)


@router.get("/aging/{kind}", response_model=AgingReport)
def aging(
    kind: str,
    as_of: date | None = None,
    currency: str | None = None,
    service: ReportService = Depends(get_report_service),
):
    """Aged receivables or payables: kind is `receivables` or `payables`."""
    try:
        aging_kind = AgingKind(kind.upper())
    except ValueError:
        raise to_http_error(ValueError(f"Aging report '{kind}' not found"))
    try:
        return service.aging(aging_kind, as_of or date.today(), currency)
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)
