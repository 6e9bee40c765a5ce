"""
Pydantic schemas for invoices and bills awaiting payment.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from ledger_core.models.enums import OpenItemType


class OpenItemCreate(BaseModel):
    item_type: OpenItemType
    document_number: str = Field(min_length=1, max_length=50)
    entity_id: str | None = Field(default=None, max_length=36)
    entity_name: str | None = Field(default=None, max_length=100)
    issue_date: date
    due_date: date | None = None
    amount: Decimal = Field(gt=0, decimal_places=4)

    @model_validator(mode="after")
    def due_after_issue(self):
        if self.due_date is not None and self.due_date < self.issue_date:
            raise ValueError("due date cannot be before issue date")
        return self


class PaymentCreate(BaseModel):
    """A payment applied against an open item."""
    amount: Decimal = Field(gt=0, decimal_places=4)


class OpenItemResponse(BaseModel):
    id: str
    item_type: OpenItemType
    document_number: str
    entity_id: str | None
    entity_name: str | None
    issue_date: date
    due_date: date | None
    amount: Decimal
    amount_paid: Decimal
    outstanding: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}
