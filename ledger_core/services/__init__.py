"""Business logic services."""

from ledger_core.services.ledger_service import LedgerService
from ledger_core.services.voucher_service import VoucherService
from ledger_core.services.open_item_service import OpenItemService
from ledger_core.services.register_service import RegisterService
from ledger_core.services.report_service import ReportService

__all__ = [
    "LedgerService",
    "VoucherService",
    "OpenItemService",
    "RegisterService",
    "ReportService",
]
