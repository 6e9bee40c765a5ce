"""
Pydantic schemas for voucher operations.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from ledger_core.models.enums import VoucherType, VoucherTo, VoucherStatus


class VoucherCreate(BaseModel):
    """
    Request to record a payment, receipt or deposit.

    PAYMENT needs an expense account; RECEIPT and DEPOSIT need
    an income account. The voucher number is generated when
    omitted.
    """
    voucher_type: VoucherType
    voucher_to: VoucherTo = VoucherTo.OTHER
    voucher_date: date
    amount: Decimal = Field(gt=0, decimal_places=4)
    description: str = Field(default="", max_length=255)
    voucher_number: str | None = Field(default=None, max_length=30)
    beneficiary_name: str | None = Field(default=None, max_length=100)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    cash_account_id: str
    expense_account_id: str | None = None
    income_account_id: str | None = None

    @model_validator(mode="after")
    def counter_account_matches_type(self):
        if self.voucher_type == VoucherType.PAYMENT and not self.expense_account_id:
            raise ValueError("payment vouchers require an expense account")
        if self.voucher_type != VoucherType.PAYMENT and not self.income_account_id:
            raise ValueError(
                f"{self.voucher_type.value.lower()} vouchers require an income account"
            )
        return self


class VoucherUpdate(BaseModel):
    """
    Partial update of a pending voucher; omitted fields are left
    unchanged. The type and number are fixed once created.
    """
    voucher_to: VoucherTo | None = None
    voucher_date: date | None = None
    amount: Decimal | None = Field(default=None, gt=0, decimal_places=4)
    description: str | None = Field(default=None, max_length=255)
    beneficiary_name: str | None = Field(default=None, max_length=100)
    cash_account_id: str | None = None
    expense_account_id: str | None = None
    income_account_id: str | None = None


class VoucherRecord(BaseModel):
    """A voucher as the engine sees it. Account references are ids."""
    id: str
    voucher_number: str | None = None
    voucher_type: VoucherType
    voucher_to: VoucherTo | None = None
    voucher_date: date | None = None
    description: str | None = None
    amount: Decimal = Field(allow_inf_nan=True)
    currency: str | None = None
    cash_account_id: str | None = None
    expense_account_id: str | None = None
    income_account_id: str | None = None
    status: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("status", mode="before")
    @classmethod
    def raw_status(cls, v):
        if isinstance(v, enum.Enum):
            return v.value
        return v


class VoucherResponse(BaseModel):
    id: str
    voucher_number: str
    voucher_type: VoucherType
    voucher_to: VoucherTo
    voucher_date: date
    beneficiary_name: str | None
    description: str
    amount: Decimal
    currency: str
    cash_account_id: str
    expense_account_id: str | None
    income_account_id: str | None
    status: VoucherStatus
    created_at: datetime
    posted_at: datetime | None

    model_config = {"from_attributes": True}
