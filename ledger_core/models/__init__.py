"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from ledger_core.models.base import Base
from ledger_core.models.enums import (
    LedgerGroup,
    TransactionState,
    TransactionStatus,
    VoucherType,
    VoucherTo,
    VoucherStatus,
    SourceType,
    OpenItemType,
    AgingKind,
)
from ledger_core.models.ledger_account import LedgerAccount
from ledger_core.models.ledger_transaction_group import LedgerTransactionGroup
from ledger_core.models.ledger_transaction import LedgerTransaction
from ledger_core.models.voucher import Voucher
from ledger_core.models.open_item import OpenItem

__all__ = [
    "Base",
    "LedgerGroup",
    "TransactionState",
    "TransactionStatus",
    "VoucherType",
    "VoucherTo",
    "VoucherStatus",
    "SourceType",
    "OpenItemType",
    "AgingKind",
    "LedgerAccount",
    "LedgerTransactionGroup",
    "LedgerTransaction",
    "Voucher",
    "OpenItem",
]
