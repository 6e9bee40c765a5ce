"""
Unified transaction register endpoint.

Journal entries and vouchers in one list, newest first.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger_core.api.errors import to_http_error
from ledger_core.config import get_settings
from ledger_core.errors import MalformedInputError
from ledger_core.models.base import get_db
from ledger_core.services.register_service import RegisterService
from ledger_core.schemas.ledger import TransactionFilter
from ledger_core.schemas.register import TransactionRegister

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=TransactionRegister)
def list_transactions(
    from_date: date | None = None,
    to_date: date | None = None,
    status: str | None = None,
    max: int | None = Query(default=None, ge=1, le=5000),
    db: Session = Depends(get_db),
):
    """
    The register, with data-quality issues and unbalanced
    posted entries reported alongside the lines.

    max applies to each source separately.
    """
    settings = get_settings()
    service = RegisterService(db, use_mock_data=settings.USE_MOCK_DATA)
    try:
        return service.list_transactions(TransactionFilter(
            from_date=from_date,
            to_date=to_date,
            status=status,
            max=max or settings.FETCH_LIMIT,
        ))
    except MalformedInputError:
        raise
    except ValueError as e:
        raise to_http_error(e)
