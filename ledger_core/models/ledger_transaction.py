"""
Ledger transaction model.

Each row is one debit or credit movement against one ledger
account. Rows are owned by a journal entry group, or were
materialised from a voucher when it was posted.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_core.models.base import Base, new_id
from ledger_core.models.enums import TransactionState, TransactionStatus


class LedgerTransaction(Base):
    """
    A single debit or credit.

    The amount is always non-negative; the direction lives in
    transaction_state. Within a group, the sum of DEBIT amounts
    must equal the sum of CREDIT amounts before the group can
    be posted. That rule is enforced by LedgerService.
    """

    __tablename__ = "ledger_transactions"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    transaction_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    transaction_state: Mapped[TransactionState] = mapped_column(
        SAEnum(TransactionState, name="transaction_state_enum"),
        nullable=False,
    )
    ledger_account_id: Mapped[str] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(TransactionStatus, name="transaction_status_enum"),
        nullable=False,
        default=TransactionStatus.DRAFT,
    )
    # Exactly one of group_id / voucher_id is set
    group_id: Mapped[str | None] = mapped_column(
        ForeignKey("ledger_transaction_groups.id"), nullable=True, index=True
    )
    voucher_id: Mapped[str | None] = mapped_column(
        ForeignKey("vouchers.id"), nullable=True, index=True
    )
    # Order of the line inside its group
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    group: Mapped["LedgerTransactionGroup | None"] = relationship(
        back_populates="transactions"
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerTransaction {self.transaction_state.value} "
            f"{self.amount} ({self.status.value})>"
        )
