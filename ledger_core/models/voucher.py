"""
Voucher model.

A voucher is a compact cash movement: a payment out of a cash
or bank account into an expense account, or a receipt into
cash from an income account. It implies one debit and one
credit leg. The legs are only written as ledger transactions
when the voucher is posted.

The voucher has a state machine governing its lifecycle.
Invalid state transitions are rejected.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base, new_id
from ledger_core.models.enums import VoucherType, VoucherTo, VoucherStatus


# Valid state transitions, the source of truth for the state machine
VALID_TRANSITIONS: dict[VoucherStatus, set[VoucherStatus]] = {
    VoucherStatus.PENDING: {VoucherStatus.APPROVED, VoucherStatus.CANCELLED},
    VoucherStatus.APPROVED: {VoucherStatus.POSTED, VoucherStatus.CANCELLED},
    VoucherStatus.POSTED: set(),  # Terminal; correct with a journal entry
    VoucherStatus.CANCELLED: set(),  # Terminal
}


class Voucher(Base):
    __tablename__ = "vouchers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    voucher_number: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False
    )
    voucher_type: Mapped[VoucherType] = mapped_column(
        SAEnum(
            VoucherType,
            name="voucher_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    voucher_to: Mapped[VoucherTo] = mapped_column(
        SAEnum(
            VoucherTo,
            name="voucher_to_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=VoucherTo.OTHER,
    )
    voucher_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    beneficiary_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    cash_account_id: Mapped[str] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    expense_account_id: Mapped[str | None] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=True
    )
    income_account_id: Mapped[str | None] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=True
    )
    status: Mapped[VoucherStatus] = mapped_column(
        SAEnum(
            VoucherStatus,
            name="voucher_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=VoucherStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    def can_transition_to(self, new_status: VoucherStatus) -> bool:
        """Check if transitioning to new_status is allowed."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return (
            f"<Voucher {self.voucher_number} {self.voucher_type.value} "
            f"{self.amount} ({self.status.value})>"
        )
