"""
Tests for the OpenItemService.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_core.models.enums import AgingKind, OpenItemType
from ledger_core.schemas.open_item import OpenItemCreate, PaymentCreate
from ledger_core.services.open_item_service import OpenItemService


def invoice(number, amount, issue=date(2024, 1, 1), due=date(2024, 1, 31),
            entity_id="c1", entity_name="Acme", item_type=OpenItemType.INVOICE):
    return OpenItemCreate(
        item_type=item_type,
        document_number=number,
        entity_id=entity_id,
        entity_name=entity_name,
        issue_date=issue,
        due_date=due,
        amount=Decimal(amount),
    )


class TestOpenItems:

    def test_create_invoice(self, db_session):
        item = OpenItemService(db_session).create_open_item(invoice("INV-1", "300"))
        assert item.outstanding == Decimal("300")

    def test_duplicate_document_rejected(self, db_session):
        service = OpenItemService(db_session)
        service.create_open_item(invoice("INV-1", "300"))
        with pytest.raises(ValueError, match="already exists"):
            service.create_open_item(invoice("INV-1", "50"))

    def test_same_number_allowed_for_invoice_and_bill(self, db_session):
        service = OpenItemService(db_session)
        service.create_open_item(invoice("DOC-1", "300"))
        bill = service.create_open_item(invoice("DOC-1", "80", item_type=OpenItemType.BILL))
        assert bill.item_type == OpenItemType.BILL

    def test_due_before_issue_invalid(self):
        with pytest.raises(ValueError, match="due date"):
            invoice("INV-1", "10", issue=date(2024, 2, 1), due=date(2024, 1, 1))

    def test_partial_payment_reduces_outstanding(self, db_session):
        service = OpenItemService(db_session)
        item = service.create_open_item(invoice("INV-1", "300"))
        service.record_payment(item.id, PaymentCreate(amount=Decimal("120")))
        assert item.outstanding == Decimal("180")

    def test_overpayment_rejected(self, db_session):
        service = OpenItemService(db_session)
        item = service.create_open_item(invoice("INV-1", "300"))
        with pytest.raises(ValueError, match="exceeds outstanding"):
            service.record_payment(item.id, PaymentCreate(amount=Decimal("300.01")))

    def test_unknown_item(self, db_session):
        with pytest.raises(ValueError, match="not found"):
            OpenItemService(db_session).record_payment("nope", PaymentCreate(amount=Decimal("1")))


class TestFetchOpenItems:

    def test_only_unpaid_items_of_the_kind(self, db_session):
        service = OpenItemService(db_session)
        paid = service.create_open_item(invoice("INV-1", "100"))
        service.record_payment(paid.id, PaymentCreate(amount=Decimal("100")))
        service.create_open_item(invoice("INV-2", "250"))
        service.create_open_item(invoice("BILL-1", "75", item_type=OpenItemType.BILL))

        receivables = service.fetch_open_items(AgingKind.RECEIVABLES)
        assert [r.document_number for r in receivables] == ["INV-2"]
        assert receivables[0].outstanding == Decimal("250")

        payables = service.fetch_open_items(AgingKind.PAYABLES)
        assert [r.document_number for r in payables] == ["BILL-1"]

    def test_items_issued_after_report_date_excluded(self, db_session):
        service = OpenItemService(db_session)
        service.create_open_item(invoice("INV-1", "100", issue=date(2024, 1, 1)))
        service.create_open_item(invoice("INV-2", "100", issue=date(2024, 3, 1), due=date(2024, 3, 31)))

        records = service.fetch_open_items(AgingKind.RECEIVABLES, as_of=date(2024, 2, 1))
        assert [r.document_number for r in records] == ["INV-1"]
