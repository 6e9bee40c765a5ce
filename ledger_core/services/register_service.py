"""
Register service: the unified transaction list.

Fetches journal entry groups, vouchers and accounts from the
store and hands them to the unifier. The two sources are fully
loaded before they are merged.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from ledger_core.engine.aggregator import AccountIndex
from ledger_core.engine.status import normalize_status, parse_status_filter
from ledger_core.engine.unifier import unify_transactions
from ledger_core.schemas.ledger import TransactionFilter
from ledger_core.schemas.register import TransactionRegister
from ledger_core.services import sample_data
from ledger_core.services.ledger_service import LedgerService
from ledger_core.services.voucher_service import VoucherService


logger = logging.getLogger(__name__)


def _filter_records(records, record_date, transaction_filter: TransactionFilter) -> list:
    """
    Apply a TransactionFilter to in-memory records the way the
    store applies it to queries: date window, register status,
    newest first, at most max records.
    """
    wanted = parse_status_filter(transaction_filter.status)
    kept = []
    for record in records:
        day = record_date(record)
        if transaction_filter.from_date is not None and (day is None or day < transaction_filter.from_date):
            continue
        if transaction_filter.to_date is not None and (day is None or day > transaction_filter.to_date):
            continue
        if wanted is not None and normalize_status(record.status) != wanted:
            continue
        kept.append(record)
    kept.sort(key=lambda record: record_date(record) or date.min, reverse=True)
    return kept[:transaction_filter.max]


class RegisterService:
    """
    Builds the register from the database, or from the sample
    records when use_mock_data is set.
    """

    def __init__(self, db: Session, use_mock_data: bool = False):
        self.db = db
        self.use_mock_data = use_mock_data
        self.ledger_service = LedgerService(db)
        self.voucher_service = VoucherService(db)

    def list_transactions(self, transaction_filter: TransactionFilter | None = None) -> TransactionRegister:
        transaction_filter = transaction_filter or TransactionFilter()

        if self.use_mock_data:
            logger.info("Serving the transaction register from sample data")
            groups = _filter_records(
                sample_data.sample_transaction_groups(),
                lambda group: group.group_date,
                transaction_filter,
            )
            vouchers = _filter_records(
                sample_data.sample_vouchers(),
                lambda voucher: voucher.voucher_date,
                transaction_filter,
            )
            return unify_transactions(groups, vouchers, sample_data.sample_accounts())

        groups = self.ledger_service.fetch_transaction_groups(transaction_filter)
        vouchers = self.voucher_service.fetch_vouchers(transaction_filter)
        accounts = AccountIndex(self.ledger_service.fetch_accounts())
        register = unify_transactions(groups, vouchers, accounts)
        logger.debug(
            "Register built from %d groups and %d vouchers: %d lines",
            len(groups), len(vouchers), len(register.lines),
        )
        return register
