"""
Open item model.

An invoice raised to a client (receivable) or a bill received
from a vendor (payable). Only the fields the aging reports
need are kept here.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Numeric, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base, new_id
from ledger_core.models.enums import OpenItemType


class OpenItem(Base):
    __tablename__ = "open_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    item_type: Mapped[OpenItemType] = mapped_column(
        SAEnum(OpenItemType, name="open_item_type_enum"),
        nullable=False,
        index=True,
    )
    document_number: Mapped[str] = mapped_column(
        String(50), nullable=False
    )
    entity_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    entity_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def outstanding(self) -> Decimal:
        return self.amount - (self.amount_paid or Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<OpenItem {self.item_type.value} {self.document_number} "
            f"{self.outstanding}>"
        )
