"""
Ledger transaction group model.

A group is one journal entry: a dated, described set of debit
and credit lines that is posted or reversed as a unit. The
group owns its lines; deleting a group deletes its lines.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_core.models.base import Base, new_id
from ledger_core.models.enums import TransactionState, TransactionStatus


# Valid status transitions for a journal entry
VALID_TRANSITIONS: dict[TransactionStatus, set[TransactionStatus]] = {
    TransactionStatus.DRAFT: {TransactionStatus.PENDING, TransactionStatus.POSTED},
    TransactionStatus.PENDING: {TransactionStatus.DRAFT, TransactionStatus.POSTED},
    TransactionStatus.POSTED: {TransactionStatus.REVERSED},
    TransactionStatus.REVERSED: set(),  # Terminal
}


class LedgerTransactionGroup(Base):
    __tablename__ = "ledger_transaction_groups"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    group_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    reference: Mapped[str | None] = mapped_column(
        String(60), unique=True, nullable=True
    )
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(TransactionStatus, name="group_status_enum"),
        nullable=False,
        default=TransactionStatus.DRAFT,
    )
    # Set on the offsetting group created by a reversal
    reversal_of_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    transactions: Mapped[list["LedgerTransaction"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="LedgerTransaction.position",
    )

    @property
    def total_debit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions
             if t.transaction_state == TransactionState.DEBIT),
            Decimal("0"),
        )

    @property
    def total_credit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions
             if t.transaction_state == TransactionState.CREDIT),
            Decimal("0"),
        )

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit

    def can_transition_to(self, new_status: TransactionStatus) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __repr__(self) -> str:
        return (
            f"<LedgerTransactionGroup {self.reference or self.id} "
            f"({self.status.value})>"
        )
