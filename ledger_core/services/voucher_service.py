"""
Voucher service: payments, receipts and deposits.

A voucher moves through PENDING -> APPROVED -> POSTED, or is
CANCELLED before it posts. Until it is posted it is only a
document; posting writes its two legs to the ledger using the
same leg rules the register uses to display it.
"""

import logging
from datetime import datetime

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from ledger_core.engine.status import normalize_status, parse_status_filter
from ledger_core.engine.unifier import (
    VOUCHER_LEG_RULES,
    prefixed_voucher_number,
    voucher_leg_rule,
)
from ledger_core.models.enums import TransactionStatus, VoucherStatus
from ledger_core.models.ledger_transaction import LedgerTransaction
from ledger_core.models.voucher import Voucher
from ledger_core.schemas.ledger import TransactionFilter
from ledger_core.schemas.voucher import VoucherCreate, VoucherRecord, VoucherUpdate
from ledger_core.services.ledger_service import LedgerService


logger = logging.getLogger(__name__)

MAX_NUMBER_LENGTH = 30


class VoucherService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger_service = LedgerService(db)

    def _next_number(self, prefix: str) -> str:
        """Next free PV-00001 / RV-00001 style number for a prefix."""
        count = self.db.execute(
            select(func.count(Voucher.id)).where(
                Voucher.voucher_number.like(f"{prefix}-%")
            )
        ).scalar()
        sequence = count + 1
        while self._find_by_number(f"{prefix}-{sequence:05d}"):
            sequence += 1
        return f"{prefix}-{sequence:05d}"

    def _find_by_number(self, voucher_number: str) -> Voucher | None:
        return self.db.execute(
            select(Voucher).where(Voucher.voucher_number == voucher_number)
        ).scalar_one_or_none()

    def _account_ids(self, voucher) -> set[str]:
        rule = voucher_leg_rule(voucher.voucher_type)
        return {voucher.cash_account_id, getattr(voucher, rule.counter_field)}

    def _legs(self, voucher) -> tuple:
        rule = voucher_leg_rule(voucher.voucher_type)
        return voucher.cash_account_id, getattr(voucher, rule.counter_field)

    def _voucher_number(self, request: VoucherCreate) -> str:
        """
        The stored number for a request: supplied numbers get the
        type's prefix, so a payment and a receipt numbered 00042 are
        PV-00042 and RV-00042.
        """
        rule = voucher_leg_rule(request.voucher_type)
        if not request.voucher_number:
            return self._next_number(rule.prefix)

        supplied = request.voucher_number.strip().upper()
        for voucher_type, other in VOUCHER_LEG_RULES.items():
            if other.prefix != rule.prefix and supplied.startswith(f"{other.prefix}-"):
                raise ValueError(
                    f"Voucher number {request.voucher_number} is a "
                    f"{voucher_type.value} number"
                )
        number = prefixed_voucher_number(request.voucher_type, request.voucher_number)
        if len(number) > MAX_NUMBER_LENGTH:
            raise ValueError(
                f"Voucher number {number} is longer than {MAX_NUMBER_LENGTH} characters"
            )
        return number

    def create_voucher(self, request: VoucherCreate) -> Voucher:
        """
        Record a PENDING voucher.

        Resending a request with a number that already exists
        returns the existing voucher (idempotency). If the number
        belongs to a voucher with a different type, amount or
        accounts, ValueError is raised instead.
        """
        voucher_number = self._voucher_number(request)
        existing = self._find_by_number(voucher_number)
        if existing:
            if (
                existing.voucher_type != request.voucher_type
                or existing.amount != request.amount
                or self._legs(existing) != self._legs(request)
            ):
                raise ValueError(
                    f"Voucher number {voucher_number} is already used "
                    f"by a different voucher"
                )
            return existing

        account_ids = self._account_ids(request)
        if len(account_ids) < 2:
            raise ValueError("Cash account and counter account must differ")
        self.ledger_service.validate_accounts(account_ids, request.currency)

        voucher = Voucher(
            voucher_number=voucher_number,
            voucher_type=request.voucher_type,
            voucher_to=request.voucher_to,
            voucher_date=request.voucher_date,
            beneficiary_name=request.beneficiary_name,
            description=request.description,
            amount=request.amount,
            currency=request.currency,
            cash_account_id=request.cash_account_id,
            expense_account_id=request.expense_account_id,
            income_account_id=request.income_account_id,
            status=VoucherStatus.PENDING,
        )
        self.db.add(voucher)
        self.db.flush()
        return voucher

    def get_voucher(self, voucher_id: str) -> Voucher:
        voucher = self.db.get(Voucher, voucher_id)
        if not voucher:
            raise ValueError(f"Voucher {voucher_id} not found")
        return voucher

    def _transition(self, voucher: Voucher, new_status: VoucherStatus) -> None:
        if not voucher.can_transition_to(new_status):
            raise ValueError(
                f"Cannot transition voucher from {voucher.status.value} "
                f"to {new_status.value}"
            )
        voucher.status = new_status

    def approve_voucher(self, voucher_id: str) -> Voucher:
        voucher = self.get_voucher(voucher_id)
        self._transition(voucher, VoucherStatus.APPROVED)
        self.db.flush()
        return voucher

    def cancel_voucher(self, voucher_id: str) -> Voucher:
        voucher = self.get_voucher(voucher_id)
        self._transition(voucher, VoucherStatus.CANCELLED)
        self.db.flush()
        logger.info("Cancelled voucher %s", voucher.voucher_number)
        return voucher

    def _require_pending(self, voucher: Voucher, action: str) -> None:
        if voucher.status != VoucherStatus.PENDING:
            raise ValueError(
                f"Can only {action} pending vouchers "
                f"(status: {voucher.status.value})"
            )

    def update_voucher(self, voucher_id: str, request: VoucherUpdate) -> Voucher:
        """
        Edit a voucher that has not been approved yet.

        The accounts are checked again after the change, with the
        same rules as creation.
        """
        voucher = self.get_voucher(voucher_id)
        self._require_pending(voucher, "edit")

        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(voucher, field, value)

        rule = voucher_leg_rule(voucher.voucher_type)
        if not getattr(voucher, rule.counter_field):
            raise ValueError(
                f"{voucher.voucher_type.value.lower()} vouchers require "
                f"an {rule.counter_suffix} account"
            )
        account_ids = self._account_ids(voucher)
        if len(account_ids) < 2:
            raise ValueError("Cash account and counter account must differ")
        self.ledger_service.validate_accounts(account_ids, voucher.currency)

        self.db.flush()
        return voucher

    def delete_voucher(self, voucher_id: str) -> None:
        """Delete a pending voucher. Approved vouchers are cancelled instead."""
        voucher = self.get_voucher(voucher_id)
        self._require_pending(voucher, "delete")
        number = voucher.voucher_number
        self.db.delete(voucher)
        self.db.flush()
        logger.info("Deleted pending voucher %s", number)

    def post_voucher(self, voucher_id: str) -> Voucher:
        """
        Post an approved voucher to the ledger.

        Writes exactly two POSTED transactions: the cash leg and
        the expense or income leg. Accounts are checked again,
        since they may have been deactivated since approval.
        """
        voucher = self.get_voucher(voucher_id)
        self._transition(voucher, VoucherStatus.POSTED)
        self.ledger_service.validate_accounts(self._account_ids(voucher), voucher.currency)

        rule = voucher_leg_rule(voucher.voucher_type)
        legs = (
            (voucher.cash_account_id, rule.cash_state),
            (getattr(voucher, rule.counter_field), rule.counter_state),
        )
        for position, (account_id, state) in enumerate(legs):
            self.db.add(LedgerTransaction(
                transaction_date=voucher.voucher_date,
                description=voucher.description,
                amount=voucher.amount,
                transaction_state=state,
                ledger_account_id=account_id,
                status=TransactionStatus.POSTED,
                voucher_id=voucher.id,
                position=position,
            ))
        voucher.posted_at = datetime.utcnow()
        self.db.flush()
        logger.info(
            "Posted %s voucher %s for %s",
            voucher.voucher_type.value, voucher.voucher_number, voucher.amount,
        )
        return voucher

    def fetch_vouchers(self, transaction_filter: TransactionFilter | None = None) -> list[VoucherRecord]:
        """
        Voucher records, newest first.

        The status filter uses register statuses, so POSTED matches
        posted vouchers and REVERSED matches cancelled ones.
        """
        transaction_filter = transaction_filter or TransactionFilter()
        query = (
            select(Voucher)
            .order_by(Voucher.voucher_date.desc(), Voucher.created_at.desc())
            .limit(transaction_filter.max)
        )
        if transaction_filter.from_date is not None:
            query = query.where(Voucher.voucher_date >= transaction_filter.from_date)
        if transaction_filter.to_date is not None:
            query = query.where(Voucher.voucher_date <= transaction_filter.to_date)
        wanted = parse_status_filter(transaction_filter.status)
        if wanted is not None:
            statuses = [s for s in VoucherStatus if normalize_status(s) == wanted]
            if not statuses:
                return []
            query = query.where(Voucher.status.in_(statuses))

        vouchers = self.db.execute(query).scalars().all()
        return [VoucherRecord.model_validate(v) for v in vouchers]
