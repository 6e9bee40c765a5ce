"""
Ledger account model (chart of accounts).

Every account in the books (cash, receivables, sales revenue,
rent expense) is a ledger account. Transactions and vouchers
reference these accounts by id.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from ledger_core.models.base import Base, new_id
from ledger_core.models.enums import CashFlowActivity, LedgerGroup


class LedgerAccount(Base):
    """
    A single leaf in the chart of accounts.

    The balance is not stored here. It is derived from posted
    transactions by LedgerService when accounts are fetched.
    """

    __tablename__ = "ledger_accounts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_id
    )
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    ledger_group: Mapped[LedgerGroup] = mapped_column(
        SAEnum(LedgerGroup, name="ledger_group_enum"),
        nullable=False,
    )
    # Display grouping only; the parent does not own the child
    parent_account_id: Mapped[str | None] = mapped_column(
        ForeignKey("ledger_accounts.id"), nullable=True
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="USD"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    # Cash and bank accounts, whose movement the cash flow statement explains
    is_cash: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    # None means the ledger group's default activity
    cash_flow_activity: Mapped[CashFlowActivity | None] = mapped_column(
        SAEnum(CashFlowActivity, name="cash_flow_activity_enum"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount {self.code} ({self.ledger_group.value})>"
