"""
Transaction unifier.

Journal entries and vouchers are authored separately but the
transaction register shows them as one list. This module turns
both into UnifiedTransactionLine rows and merges them:

1. Every transaction inside a journal entry group becomes a line.
2. Every voucher becomes two lines: the cash side and the
   expense/income side.
3. The lines are sorted newest first. The sort is stable, so
   equal dates keep their input order and paging is repeatable.

Nothing here touches the database. Inputs are fully materialised
records; references to accounts are resolved through AccountIndex.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ledger_core.engine.aggregator import AccountIndex
from ledger_core.engine.numeric import require_finite, ZERO
from ledger_core.engine.status import first_status, normalize_status
from ledger_core.models.enums import (
    SourceType,
    TransactionState,
    TransactionStatus,
    VoucherType,
)
from ledger_core.schemas.diagnostics import (
    DataQualityIssue,
    DataQualityKind,
    InvariantKind,
    InvariantViolation,
)
from ledger_core.schemas.ledger import LedgerTransactionGroupRecord
from ledger_core.schemas.register import (
    GroupBalance,
    RegisterTotals,
    TransactionRegister,
    UnifiedTransactionLine,
)
from ledger_core.schemas.voucher import VoucherRecord


logger = logging.getLogger(__name__)

MISSING_ACCOUNT_MARKER = "[missing account]"


@dataclass(frozen=True)
class VoucherLegRule:
    """How a voucher type splits into register lines."""
    prefix: str
    source_type: SourceType
    cash_state: TransactionState
    counter_field: str
    counter_suffix: str

    @property
    def counter_state(self) -> TransactionState:
        if self.cash_state == TransactionState.DEBIT:
            return TransactionState.CREDIT
        return TransactionState.DEBIT


# Payments move cash out into an expense; receipts and deposits move
# cash in from an income account.
VOUCHER_LEG_RULES: dict[VoucherType, VoucherLegRule] = {
    VoucherType.PAYMENT: VoucherLegRule(
        prefix="PV",
        source_type=SourceType.PAYMENT,
        cash_state=TransactionState.CREDIT,
        counter_field="expense_account_id",
        counter_suffix="expense",
    ),
    VoucherType.RECEIPT: VoucherLegRule(
        prefix="RV",
        source_type=SourceType.RECEIPT,
        cash_state=TransactionState.DEBIT,
        counter_field="income_account_id",
        counter_suffix="income",
    ),
    VoucherType.DEPOSIT: VoucherLegRule(
        prefix="RV",
        source_type=SourceType.RECEIPT,
        cash_state=TransactionState.DEBIT,
        counter_field="income_account_id",
        counter_suffix="income",
    ),
}

_unhandled = set(VoucherType) - set(VOUCHER_LEG_RULES)
if _unhandled:
    raise RuntimeError(
        f"No voucher leg rule for: {sorted(t.value for t in _unhandled)}"
    )


def voucher_leg_rule(voucher_type: VoucherType) -> VoucherLegRule:
    return VOUCHER_LEG_RULES[VoucherType(voucher_type)]


def _short_id(record_id) -> str:
    return str(record_id or "00000")[:5].upper()


def group_transaction_id(group: LedgerTransactionGroupRecord) -> str:
    """The reference shared by every line of a journal entry."""
    return group.reference or f"JE-{_short_id(group.id)}"


def prefixed_voucher_number(voucher_type: VoucherType, number: str) -> str:
    """'00042' -> 'PV-00042' for a payment; already-prefixed numbers pass through."""
    prefix = voucher_leg_rule(voucher_type).prefix
    number = number.strip()
    if number.upper().startswith(f"{prefix}-"):
        return number
    return f"{prefix}-{number}"


def voucher_transaction_id(voucher: VoucherRecord) -> str:
    number = (voucher.voucher_number or "").strip()
    if not number:
        prefix = voucher_leg_rule(voucher.voucher_type).prefix
        return f"{prefix}-{_short_id(voucher.id)}"
    return prefixed_voucher_number(voucher.voucher_type, number)


def _amounts(state: TransactionState | None, amount: Decimal) -> tuple[Decimal, Decimal]:
    if state == TransactionState.DEBIT:
        return amount, ZERO
    if state == TransactionState.CREDIT:
        return ZERO, amount
    return ZERO, ZERO


def _account_label(accounts: AccountIndex, account_id, record_type, record_id, issues):
    """Resolve an account id to (code, name), recording dangling references."""
    account = accounts.get(account_id)
    if account is not None:
        return account.code, account.name
    issues.append(DataQualityIssue(
        kind=DataQualityKind.MISSING_ACCOUNT,
        record_type=record_type,
        record_id=str(record_id),
        message=f"Account {account_id} is not in the chart of accounts",
    ))
    return "", MISSING_ACCOUNT_MARKER


def check_group_balance(group: LedgerTransactionGroupRecord) -> GroupBalance:
    total_debit = ZERO
    total_credit = ZERO
    for tx in group.transactions:
        amount = require_finite(
            tx.amount, "LedgerTransaction", tx.id, allow_negative=False
        )
        if tx.transaction_state == TransactionState.DEBIT:
            total_debit += amount
        elif tx.transaction_state == TransactionState.CREDIT:
            total_credit += amount
    difference = total_debit - total_credit
    return GroupBalance(
        group_id=group.id,
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=difference == 0,
    )


def transform_transaction_group(
    group: LedgerTransactionGroupRecord,
    accounts: AccountIndex,
    issues: list[DataQualityIssue],
) -> list[UnifiedTransactionLine]:
    """One register line per transaction in the group, in group order."""
    transaction_id = group_transaction_id(group)
    lines = []

    for index, tx in enumerate(group.transactions):
        amount = require_finite(
            tx.amount, "LedgerTransaction", tx.id, allow_negative=False
        )
        if tx.transaction_state is None:
            issues.append(DataQualityIssue(
                kind=DataQualityKind.MISSING_TRANSACTION_STATE,
                record_type="LedgerTransaction",
                record_id=tx.id,
                message="Transaction is neither DEBIT nor CREDIT",
            ))
        debit, credit = _amounts(tx.transaction_state, amount)
        if tx.ledger_account_id:
            code, name = _account_label(
                accounts, tx.ledger_account_id, "LedgerTransaction", tx.id, issues
            )
        else:
            issues.append(DataQualityIssue(
                kind=DataQualityKind.MISSING_ACCOUNT,
                record_type="LedgerTransaction",
                record_id=tx.id,
                message=f"Transaction in journal entry {transaction_id} has no account",
            ))
            code, name = "", MISSING_ACCOUNT_MARKER
        lines.append(UnifiedTransactionLine(
            id=f"{group.id}-{index}",
            date=group.group_date or tx.transaction_date,
            transaction_id=transaction_id,
            description=tx.description or group.description or "",
            account_code=code,
            account_name=name,
            debit_amount=debit,
            credit_amount=credit,
            status=first_status(group.status, tx.status),
            source_type=SourceType.JOURNAL_ENTRY,
            source_id=group.id,
        ))

    return lines


def transform_voucher(
    voucher: VoucherRecord,
    accounts: AccountIndex,
    issues: list[DataQualityIssue],
) -> list[UnifiedTransactionLine]:
    """
    The two implied legs of a voucher.

    A leg whose account id is absent is left out and reported.
    A leg whose id is set but unknown is kept with a marker name.
    """
    rule = voucher_leg_rule(voucher.voucher_type)
    amount = require_finite(
        voucher.amount, "Voucher", voucher.id, allow_negative=False
    )
    transaction_id = voucher_transaction_id(voucher)
    status = normalize_status(voucher.status)
    lines = []

    legs = (
        ("cash", voucher.cash_account_id, rule.cash_state,
         DataQualityKind.MISSING_CASH_ACCOUNT),
        (rule.counter_suffix, getattr(voucher, rule.counter_field), rule.counter_state,
         DataQualityKind.MISSING_COUNTER_ACCOUNT),
    )
    for suffix, account_id, state, missing_kind in legs:
        if not account_id:
            issues.append(DataQualityIssue(
                kind=missing_kind,
                record_type="Voucher",
                record_id=voucher.id,
                message=(
                    f"{voucher.voucher_type.value} voucher "
                    f"{transaction_id} has no {suffix} account"
                ),
            ))
            continue
        debit, credit = _amounts(state, amount)
        code, name = _account_label(accounts, account_id, "Voucher", voucher.id, issues)
        lines.append(UnifiedTransactionLine(
            id=f"{voucher.id}-{suffix}",
            date=voucher.voucher_date,
            transaction_id=transaction_id,
            description=voucher.description or "",
            account_code=code,
            account_name=name,
            debit_amount=debit,
            credit_amount=credit,
            status=status,
            source_type=rule.source_type,
            source_id=voucher.id,
        ))

    return lines


def sort_lines(lines: Iterable[UnifiedTransactionLine]) -> list[UnifiedTransactionLine]:
    """Newest first; equal dates keep input order; undated lines last."""
    return sorted(lines, key=lambda line: line.date or date.min, reverse=True)


def register_totals(
    lines: Iterable[UnifiedTransactionLine],
    statuses: Iterable[TransactionStatus] | None = None,
) -> RegisterTotals:
    """Sum debits and credits, optionally only for lines in the given statuses."""
    wanted = set(statuses) if statuses is not None else None
    total_debit = ZERO
    total_credit = ZERO
    for line in lines:
        if wanted is not None and line.status not in wanted:
            continue
        total_debit += line.debit_amount
        total_credit += line.credit_amount
    return RegisterTotals(
        total_debit=total_debit,
        total_credit=total_credit,
        difference=total_debit - total_credit,
    )


def unify_transactions(
    groups: Iterable[LedgerTransactionGroupRecord],
    vouchers: Iterable[VoucherRecord],
    accounts=None,
) -> TransactionRegister:
    """
    Merge journal entry groups and vouchers into one register.

    Args:
        groups: journal entry groups with their transactions
        vouchers: payment / receipt / deposit vouchers
        accounts: AccountIndex or iterable of LedgerAccountRecord
            used to resolve account codes and names

    Raises:
        MalformedInputError: an amount is not a finite number
    """
    index = AccountIndex.of(accounts)
    issues: list[DataQualityIssue] = []
    violations: list[InvariantViolation] = []
    lines: list[UnifiedTransactionLine] = []

    for group in groups:
        lines.extend(transform_transaction_group(group, index, issues))
        if normalize_status(group.status) == TransactionStatus.POSTED:
            balance = check_group_balance(group)
            if not balance.is_balanced:
                violations.append(InvariantViolation(
                    kind=InvariantKind.UNBALANCED_POSTED_GROUP,
                    record_id=group.id,
                    expected=balance.total_debit,
                    actual=balance.total_credit,
                    discrepancy=balance.difference,
                ))

    for voucher in vouchers:
        lines.extend(transform_voucher(voucher, index, issues))

    lines = sort_lines(lines)
    totals = register_totals(lines)

    for issue in issues:
        logger.warning(
            "Register data quality: %s %s: %s",
            issue.record_type, issue.record_id, issue.message,
        )
    for violation in violations:
        logger.warning(
            "Posted group %s does not balance (difference %s)",
            violation.record_id, violation.discrepancy,
        )

    return TransactionRegister(
        lines=lines,
        total_debit=totals.total_debit,
        total_credit=totals.total_credit,
        issues=issues,
        violations=violations,
    )
