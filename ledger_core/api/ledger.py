"""
Ledger API endpoints: chart of accounts and journal entries.

The API layer is thin. It handles HTTP concerns (status codes,
response formatting) and delegates all business logic to the
LedgerService.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ledger_core.api.errors import to_http_error
from ledger_core.errors import MalformedInputError
from ledger_core.models.base import get_db
from ledger_core.services.ledger_service import LedgerService
from ledger_core.schemas.ledger import (
    AccountBalanceResponse,
    IntegrityReport,
    JournalEntryCreate,
    JournalEntryResponse,
    LedgerAccountCreate,
    LedgerAccountResponse,
    LedgerAccountUpdate,
    LedgerTransactionGroupRecord,
    LedgerTransactionResponse,
    TransactionFilter,
)
from ledger_core.schemas.reports import ChartOfAccounts

router = APIRouter(prefix="/ledger", tags=["Ledger"])


# --- Accounts ---

@router.post("/accounts", response_model=LedgerAccountResponse, status_code=201)
def create_ledger_account(
    request: LedgerAccountCreate,
    db: Session = Depends(get_db),
):
    """
    Create a new ledger account.

    Every account in the chart of accounts must be created
    before entries can be posted to it.
    """
    service = LedgerService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/accounts", response_model=list[LedgerAccountResponse])
def list_ledger_accounts(
    active_only: bool = False,
    db: Session = Depends(get_db),
):
    return LedgerService(db).list_accounts(active_only=active_only)


@router.get("/chart-of-accounts", response_model=ChartOfAccounts)
def get_chart_of_accounts(
    active_only: bool = True,
    db: Session = Depends(get_db),
):
    """Accounts grouped by ledger group, with current balances."""
    service = LedgerService(db)
    try:
        return service.chart_of_accounts(active_only=active_only)
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)


@router.patch("/accounts/{account_id}", response_model=LedgerAccountResponse)
def update_ledger_account(
    account_id: str,
    request: LedgerAccountUpdate,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_ledger_account(
    account_id: str,
    db: Session = Depends(get_db),
):
    """
    Delete an unused account.

    Accounts with any history are rejected; deactivate them
    with PATCH instead.
    """
    service = LedgerService(db)
    try:
        service.delete_account(account_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.get(
    "/accounts/{account_id}/balance",
    response_model=AccountBalanceResponse,
)
def get_account_balance(
    account_id: str,
    from_date: date | None = None,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    """
    Get the balance of a ledger account, optionally over a window.

    Balance is calculated from posted transactions, not stored.
    """
    service = LedgerService(db)
    try:
        balance = service.get_account_balance(account_id, from_date, as_of)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    account = service.get_account(account_id)

    return AccountBalanceResponse(
        account_id=account.id,
        account_code=account.code,
        ledger_group=account.ledger_group,
        balance=balance,
        currency=account.currency,
    )


@router.get(
    "/accounts/{account_id}/transactions",
    response_model=list[LedgerTransactionResponse],
)
def list_account_transactions(
    account_id: str,
    from_date: date | None = None,
    to_date: date | None = None,
    max: int = Query(default=500, ge=1, le=5000),
    db: Session = Depends(get_db),
):
    """Every transaction against one account, newest first."""
    service = LedgerService(db)
    try:
        return service.get_account_transactions(account_id, from_date, to_date, max)
    except ValueError as e:
        raise to_http_error(e)


# --- Journal entries ---

@router.post("/journal-entries", response_model=JournalEntryResponse, status_code=201)
def create_journal_entry(
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Record a journal entry, optionally posting it at once.

    If the reference has been used before, the existing entry
    is returned (idempotency).
    """
    service = LedgerService(db)
    try:
        group = service.create_journal_entry(request)
        db.commit()
        return group
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("/journal-entries", response_model=list[LedgerTransactionGroupRecord])
def list_journal_entries(
    from_date: date | None = None,
    to_date: date | None = None,
    status: str | None = None,
    max: int = Query(default=500, ge=1, le=5000),
    db: Session = Depends(get_db),
):
    """Journal entries with their lines, newest first."""
    service = LedgerService(db)
    try:
        return service.fetch_transaction_groups(TransactionFilter(
            from_date=from_date, to_date=to_date, status=status, max=max,
        ))
    except ValueError as e:
        raise to_http_error(e)


@router.get("/journal-entries/{group_id}", response_model=JournalEntryResponse)
def get_journal_entry(
    group_id: str,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        return service.get_group(group_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/journal-entries/{group_id}", status_code=204)
def delete_journal_entry(
    group_id: str,
    db: Session = Depends(get_db),
):
    """Delete a draft entry. Submitted and posted entries are kept."""
    service = LedgerService(db)
    try:
        service.delete_group(group_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


def _lifecycle_action(db: Session, action) -> JournalEntryResponse:
    try:
        group = action()
        db.commit()
        return group
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/journal-entries/{group_id}/submit", response_model=JournalEntryResponse)
def submit_journal_entry(group_id: str, db: Session = Depends(get_db)):
    """Move a draft entry to PENDING."""
    service = LedgerService(db)
    return _lifecycle_action(db, lambda: service.submit_group(group_id))


@router.post("/journal-entries/{group_id}/post", response_model=JournalEntryResponse)
def post_journal_entry(group_id: str, db: Session = Depends(get_db)):
    """Post an entry. Rejected with 400 if it does not balance."""
    service = LedgerService(db)
    return _lifecycle_action(db, lambda: service.post_group(group_id))


@router.post("/journal-entries/{group_id}/reverse", response_model=JournalEntryResponse)
def reverse_journal_entry(
    group_id: str,
    reversal_date: date | None = None,
    db: Session = Depends(get_db),
):
    """Reverse a posted entry. Returns the new offsetting entry."""
    service = LedgerService(db)
    return _lifecycle_action(db, lambda: service.reverse_group(group_id, reversal_date))


@router.get("/integrity", response_model=IntegrityReport)
def check_ledger_integrity(db: Session = Depends(get_db)):
    """Verify that total debits equal total credits across the ledger."""
    return LedgerService(db).check_integrity()
