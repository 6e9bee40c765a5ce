"""
Voucher API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ledger_core.api.errors import to_http_error
from ledger_core.models.base import get_db
from ledger_core.services.voucher_service import VoucherService
from ledger_core.schemas.ledger import TransactionFilter
from ledger_core.schemas.voucher import (
    VoucherCreate,
    VoucherRecord,
    VoucherResponse,
    VoucherUpdate,
)

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


@router.post("", response_model=VoucherResponse, status_code=201)
def create_voucher(
    request: VoucherCreate,
    db: Session = Depends(get_db),
):
    """Record a payment, receipt or deposit voucher in PENDING status."""
    service = VoucherService(db)
    try:
        voucher = service.create_voucher(request)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.get("", response_model=list[VoucherRecord])
def list_vouchers(
    from_date: date | None = None,
    to_date: date | None = None,
    status: str | None = None,
    max: int = Query(default=500, ge=1, le=5000),
    db: Session = Depends(get_db),
):
    service = VoucherService(db)
    try:
        return service.fetch_vouchers(TransactionFilter(
            from_date=from_date, to_date=to_date, status=status, max=max,
        ))
    except ValueError as e:
        raise to_http_error(e)


@router.get("/{voucher_id}", response_model=VoucherResponse)
def get_voucher(
    voucher_id: str,
    db: Session = Depends(get_db),
):
    service = VoucherService(db)
    try:
        return service.get_voucher(voucher_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{voucher_id}/approve", response_model=VoucherResponse)
def approve_voucher(voucher_id: str, db: Session = Depends(get_db)):
    service = VoucherService(db)
    try:
        voucher = service.approve_voucher(voucher_id)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/{voucher_id}/post", response_model=VoucherResponse)
def post_voucher(voucher_id: str, db: Session = Depends(get_db)):
    """
    Post an approved voucher.

    Writes its cash leg and its expense or income leg to the
    ledger as posted transactions.
    """
    service = VoucherService(db)
    try:
        voucher = service.post_voucher(voucher_id)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.post("/{voucher_id}/cancel", response_model=VoucherResponse)
def cancel_voucher(voucher_id: str, db: Session = Depends(get_db)):
    service = VoucherService(db)
    try:
        voucher = service.cancel_voucher(voucher_id)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.patch("/{voucher_id}", response_model=VoucherResponse)
def update_voucher(
    voucher_id: str,
    request: VoucherUpdate,
    db: Session = Depends(get_db),
):
    """Edit a pending voucher. Approved and later vouchers are rejected with 400."""
    service = VoucherService(db)
    try:
        voucher = service.update_voucher(voucher_id, request)
        db.commit()
        return voucher
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)


@router.delete("/{voucher_id}", status_code=204)
def delete_voucher(voucher_id: str, db: Session = Depends(get_db)):
    """Delete a pending voucher."""
    service = VoucherService(db)
    try:
        service.delete_voucher(voucher_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise to_http_error(e)
