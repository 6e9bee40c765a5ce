"""
Open item service: the invoices and bills the aging reports read.
"""

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_core.models.enums import AGING_KIND_TO_ITEM_TYPE, AgingKind
from ledger_core.models.open_item import OpenItem
from ledger_core.schemas.open_item import OpenItemCreate, PaymentCreate
from ledger_core.schemas.reports import OpenItemRecord


logger = logging.getLogger(__name__)


class OpenItemService:

    def __init__(self, db: Session):
        self.db = db

    def create_open_item(self, request: OpenItemCreate) -> OpenItem:
        existing = self.db.execute(
            select(OpenItem).where(
                OpenItem.item_type == request.item_type,
                OpenItem.document_number == request.document_number,
            )
        ).scalar_one_or_none()
        if existing:
            raise ValueError(
                f"{request.item_type.value.title()} '{request.document_number}' already exists"
            )

        item = OpenItem(**request.model_dump())
        self.db.add(item)
        self.db.flush()
        return item

    def get_open_item(self, item_id: str) -> OpenItem:
        item = self.db.get(OpenItem, item_id)
        if not item:
            raise ValueError(f"Open item {item_id} not found")
        return item

    def record_payment(self, item_id: str, request: PaymentCreate) -> OpenItem:
        """
        Apply a payment to an invoice or bill.

        Overpayment is rejected; a fully paid item drops out of
        the aging reports.
        """
        item = self.get_open_item(item_id)
        if request.amount > item.outstanding:
            raise ValueError(
                f"Payment of {request.amount} exceeds outstanding "
                f"amount {item.outstanding} on {item.document_number}"
            )
        item.amount_paid = item.amount_paid + request.amount
        self.db.flush()
        logger.info(
            "Recorded payment of %s on %s %s",
            request.amount, item.item_type.value, item.document_number,
        )
        return item

    def fetch_open_items(self, kind: AgingKind, as_of: date | None = None) -> list[OpenItemRecord]:
        """
        Items with a positive outstanding amount.

        Items issued after as_of are left out: they did not exist
        on the report date.
        """
        query = (
            select(OpenItem)
            .where(OpenItem.item_type == AGING_KIND_TO_ITEM_TYPE[kind])
            .where(OpenItem.amount > OpenItem.amount_paid)
            .order_by(OpenItem.entity_name, OpenItem.document_number)
        )
        if as_of is not None:
            query = query.where(OpenItem.issue_date <= as_of)

        items = self.db.execute(query).scalars().all()
        return [OpenItemRecord.model_validate(item) for item in items]
