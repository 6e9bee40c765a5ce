"""
Schemas for the unified transaction register.

Register lines are projections built fresh on every query from
journal entry groups and vouchers. They are never stored.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from ledger_core.models.enums import SourceType, TransactionStatus
from ledger_core.schemas.diagnostics import DataQualityIssue, InvariantViolation


class UnifiedTransactionLine(BaseModel):
    """
    One debit or credit row in the register.

    At most one of debit_amount / credit_amount is non-zero;
    a line with both set is rejected at construction.
    """
    id: str
    date: datetime.date | None
    transaction_id: str
    description: str = ""
    account_code: str = ""
    account_name: str = ""
    debit_amount: Decimal = Decimal("0")
    credit_amount: Decimal = Decimal("0")
    status: TransactionStatus = TransactionStatus.DRAFT
    source_type: SourceType
    source_id: str

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def single_sided(self):
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValueError("register amounts cannot be negative")
        if self.debit_amount != 0 and self.credit_amount != 0:
            raise ValueError("a register line cannot be both debit and credit")
        return self


class RegisterTotals(BaseModel):
    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal


class TransactionRegister(BaseModel):
    lines: list[UnifiedTransactionLine] = Field(default_factory=list)
    total_debit: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")
    issues: list[DataQualityIssue] = Field(default_factory=list)
    violations: list[InvariantViolation] = Field(default_factory=list)


class GroupBalance(BaseModel):
    group_id: str
    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal
    is_balanced: bool
