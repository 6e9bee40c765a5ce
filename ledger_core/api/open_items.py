"""
Invoice and bill endpoints feeding the aging reports.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger_core.api.errors import to_http_error
from ledger_core.models.base import get_db
from ledger_core.services.open_item_service import OpenItemService
from ledger_core.schemas.open_item import OpenItemCreate, OpenItemResponse, PaymentCreate

router = APIRouter(prefix="/open-items", tags=["Open Items"])


@router.post("", response_model=OpenItemResponse, status_code=201)
def create_open_item(
    request: OpenItemCreate,
    db: Session = Depends(get_db),
):
    service = OpenItemService(db)
    try:
        item = service.create_open_item(request)
        db.commit()
        return item
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/{item_id}/payments", response_model=OpenItemResponse)
def record_payment(
    item_id: str,
    request: PaymentCreate,
    db: Session = Depends(get_db),
):
    """Apply a payment; overpayment is rejected."""
    service = OpenItemService(db)
    try:
        item = service.record_payment(item_id, request)
        db.commit()
        return item
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)
