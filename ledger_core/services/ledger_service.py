"""
Ledger service: chart of accounts and journal entries.

This service enforces the bookkeeping rules:
1. A journal entry must balance (debits = credits) to be posted
2. Posted entries are never edited, only reversed
3. Accounts must exist, be active and match the entry currency
4. An account's ledger group is fixed once anything references it

It is also the store the engine reads from: fetch_accounts and
fetch_transaction_groups return plain records, never ORM rows.
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from ledger_core.engine.aggregator import group_accounts, is_normal_debit
from ledger_core.engine.status import parse_status_filter
from ledger_core.models.enums import (
    BALANCE_STATUSES,
    TransactionState,
    TransactionStatus,
)
from ledger_core.models.ledger_account import LedgerAccount
from ledger_core.models.ledger_transaction import LedgerTransaction
from ledger_core.models.ledger_transaction_group import LedgerTransactionGroup
from ledger_core.models.voucher import Voucher
from ledger_core.schemas.ledger import (
    AccountFilter,
    IntegrityReport,
    JournalEntryCreate,
    LedgerAccountCreate,
    LedgerAccountRecord,
    LedgerAccountUpdate,
    LedgerTransactionGroupRecord,
    TransactionFilter,
)
from ledger_core.schemas.reports import ChartOfAccounts


logger = logging.getLogger(__name__)

FOUR_PLACES = Decimal("0.0001")


def _to_decimal(value) -> Decimal:
    # SQLite hands back floats from SUM()
    return Decimal(str(value or 0)).quantize(FOUR_PLACES)


def _swap(state: TransactionState) -> TransactionState:
    if state == TransactionState.DEBIT:
        return TransactionState.CREDIT
    return TransactionState.DEBIT


class LedgerService:
    """
    All chart-of-accounts and journal entry writes pass through here.

    The service takes a database session as a constructor
    argument. The caller controls the transaction boundary and
    decides when to commit or rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Accounts ---

    def create_account(self, request: LedgerAccountCreate) -> LedgerAccount:
        """
        Create a new ledger account.

        Raises ValueError if the code already exists or the
        parent account does not.
        """
        existing = self.db.execute(
            select(LedgerAccount).where(LedgerAccount.code == request.code)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(f"Account with code '{request.code}' already exists")

        if request.parent_account_id:
            self.get_account(request.parent_account_id)

        account = LedgerAccount(
            code=request.code,
            name=request.name,
            ledger_group=request.ledger_group,
            parent_account_id=request.parent_account_id,
            currency=request.currency,
            is_cash=request.is_cash,
            cash_flow_activity=request.cash_flow_activity,
        )
        self.db.add(account)
        self.db.flush()
        logger.info("Created ledger account %s (%s)", account.code, account.ledger_group.value)
        return account

    def get_account(self, account_id: str) -> LedgerAccount:
        account = self.db.get(LedgerAccount, account_id)
        if not account:
            raise ValueError(f"Account {account_id} not found")
        return account

    def list_accounts(self, active_only: bool = False) -> list[LedgerAccount]:
        query = select(LedgerAccount).order_by(LedgerAccount.code)
        if active_only:
            query = query.where(LedgerAccount.is_active.is_(True))
        return list(self.db.execute(query).scalars().all())

    def _reference_counts(self, account_id: str) -> tuple[int, int]:
        """(posted references, all references) from transactions and vouchers."""
        posted = self.db.execute(
            select(func.count(LedgerTransaction.id)).where(
                LedgerTransaction.ledger_account_id == account_id,
                LedgerTransaction.status.in_(list(BALANCE_STATUSES)),
            )
        ).scalar()
        transactions = self.db.execute(
            select(func.count(LedgerTransaction.id)).where(
                LedgerTransaction.ledger_account_id == account_id
            )
        ).scalar()
        vouchers = self.db.execute(
            select(func.count(Voucher.id)).where(
                (Voucher.cash_account_id == account_id)
                | (Voucher.expense_account_id == account_id)
                | (Voucher.income_account_id == account_id)
            )
        ).scalar()
        return posted, transactions + vouchers

    def update_account(self, account_id: str, request: LedgerAccountUpdate) -> LedgerAccount:
        """
        Apply a partial update.

        Moving an account to another ledger group would silently
        restate every report it already appears in, so it is only
        allowed while nothing references the account.
        """
        account = self.get_account(account_id)

        if request.ledger_group is not None and request.ledger_group != account.ledger_group:
            _, references = self._reference_counts(account_id)
            if references:
                raise ValueError(
                    f"Cannot change ledger group of account {account.code}: "
                    f"it is referenced by {references} transaction(s) or voucher(s)"
                )
            account.ledger_group = request.ledger_group

        if request.parent_account_id is not None:
            if request.parent_account_id == account.id:
                raise ValueError("An account cannot be its own parent")
            self.get_account(request.parent_account_id)
            account.parent_account_id = request.parent_account_id
        if request.name is not None:
            account.name = request.name
        if request.is_active is not None:
            account.is_active = request.is_active
        if request.is_cash is not None:
            account.is_cash = request.is_cash
        if request.cash_flow_activity is not None:
            account.cash_flow_activity = request.cash_flow_activity

        self.db.flush()
        return account

    def deactivate_account(self, account_id: str) -> LedgerAccount:
        account = self.get_account(account_id)
        account.is_active = False
        self.db.flush()
        logger.info("Deactivated ledger account %s", account.code)
        return account

    def delete_account(self, account_id: str) -> None:
        """
        Delete an account nothing refers to.

        Accounts with posted history can never be deleted. Accounts
        referenced only by drafts or pending vouchers must be
        deactivated instead.
        """
        account = self.get_account(account_id)
        posted, references = self._reference_counts(account_id)
        if posted:
            raise ValueError(
                f"Account {account.code} has {posted} posted transaction(s) "
                f"and cannot be deleted"
            )
        if references:
            raise ValueError(
                f"Account {account.code} is referenced by unposted entries; "
                f"deactivate it instead"
            )
        children = self.db.execute(
            select(func.count(LedgerAccount.id)).where(
                LedgerAccount.parent_account_id == account_id
            )
        ).scalar()
        if children:
            raise ValueError(f"Account {account.code} has child accounts")

        self.db.delete(account)
        self.db.flush()
        logger.info("Deleted ledger account %s", account.code)

    # --- Journal entries ---

    def validate_accounts(self, account_ids: set[str], currency: str) -> dict[str, LedgerAccount]:
        accounts = self.db.execute(
            select(LedgerAccount).where(LedgerAccount.id.in_(account_ids))
        ).scalars().all()
        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id)
        if missing:
            raise ValueError(f"Accounts not found: {sorted(missing)}")

        for account in accounts_by_id.values():
            if not account.is_active:
                raise ValueError(f"Account {account.code} is not active")
            if account.currency != currency:
                raise ValueError(
                    f"Account {account.code} currency is "
                    f"{account.currency}, entry currency is {currency}"
                )
        return accounts_by_id

    def get_group(self, group_id: str) -> LedgerTransactionGroup:
        group = self.db.get(LedgerTransactionGroup, group_id)
        if not group:
            raise ValueError(f"Journal entry {group_id} not found")
        return group

    def _find_by_reference(self, reference: str) -> LedgerTransactionGroup | None:
        return self.db.execute(
            select(LedgerTransactionGroup).where(
                LedgerTransactionGroup.reference == reference
            )
        ).scalar_one_or_none()

    def create_journal_entry(self, request: JournalEntryCreate) -> LedgerTransactionGroup:
        """
        Record a journal entry as a DRAFT group, posting it
        straight away when request.post is set.

        If the reference has been used before, the existing group
        is returned unchanged (idempotency).
        """
        if request.reference:
            existing = self._find_by_reference(request.reference)
            if existing:
                return existing

        self.validate_accounts(
            {line.account_id for line in request.lines}, request.currency
        )

        group = LedgerTransactionGroup(
            group_date=request.entry_date,
            description=request.description,
            reference=request.reference,
            status=TransactionStatus.DRAFT,
        )
        for position, line in enumerate(request.lines):
            if line.debit_amount > 0:
                state, amount = TransactionState.DEBIT, line.debit_amount
            else:
                state, amount = TransactionState.CREDIT, line.credit_amount
            group.transactions.append(LedgerTransaction(
                transaction_date=request.entry_date,
                description=line.description or "",
                amount=amount,
                transaction_state=state,
                ledger_account_id=line.account_id,
                status=TransactionStatus.DRAFT,
                position=position,
            ))

        self.db.add(group)
        self.db.flush()

        if request.post:
            self.post_group(group.id)
        return group

    def _transition(self, group: LedgerTransactionGroup, new_status: TransactionStatus) -> None:
        if not group.can_transition_to(new_status):
            raise ValueError(
                f"Cannot move journal entry from {group.status.value} "
                f"to {new_status.value}"
            )
        group.status = new_status
        for tx in group.transactions:
            tx.status = new_status

    def submit_group(self, group_id: str) -> LedgerTransactionGroup:
        """DRAFT -> PENDING: hand the entry over for review."""
        group = self.get_group(group_id)
        self._transition(group, TransactionStatus.PENDING)
        self.db.flush()
        return group

    def post_group(self, group_id: str) -> LedgerTransactionGroup:
        """
        Post a journal entry so it moves account balances.

        Raises ValueError if the entry does not balance. Nothing
        is changed in that case.
        """
        group = self.get_group(group_id)
        if not group.is_balanced:
            raise ValueError(
                f"Journal entry does not balance: "
                f"debits={group.total_debit}, credits={group.total_credit}"
            )
        self._transition(group, TransactionStatus.POSTED)
        group.posted_at = datetime.utcnow()
        self.db.flush()
        logger.info("Posted journal entry %s", group.reference or group.id)
        return group

    def reverse_group(self, group_id: str, reversal_date: date | None = None) -> LedgerTransactionGroup:
        """
        Reverse a posted journal entry.

        The original is not edited. A new POSTED group mirrors it
        with debits and credits swapped, and the original is marked
        REVERSED. Both keep counting towards balances, so they net
        to zero while the history stays visible.
        """
        original = self.get_group(group_id)
        if original.status != TransactionStatus.POSTED:
            raise ValueError(
                f"Can only reverse posted journal entries "
                f"(status: {original.status.value})"
            )

        entry_date = reversal_date or date.today()
        base_reference = original.reference or f"JE-{original.id[:5].upper()}"
        reversal_reference = f"REV-{base_reference}"
        if self._find_by_reference(reversal_reference):
            raise ValueError(
                f"Cannot reverse journal entry {base_reference}: "
                f"reference {reversal_reference} is already in use"
            )
        reversal = LedgerTransactionGroup(
            group_date=entry_date,
            description=f"Reversal: {original.description}",
            reference=reversal_reference,
            status=TransactionStatus.POSTED,
            reversal_of_id=original.id,
            posted_at=datetime.utcnow(),
        )
        for tx in original.transactions:
            reversal.transactions.append(LedgerTransaction(
                transaction_date=entry_date,
                description=f"Reversal: {tx.description}" if tx.description else "",
                amount=tx.amount,
                transaction_state=_swap(tx.transaction_state),
                ledger_account_id=tx.ledger_account_id,
                status=TransactionStatus.POSTED,
                position=tx.position,
            ))
        self.db.add(reversal)
        self._transition(original, TransactionStatus.REVERSED)
        self.db.flush()
        logger.info(
            "Reversed journal entry %s with %s", base_reference, reversal.reference
        )
        return reversal

    def delete_group(self, group_id: str) -> None:
        """
        Delete a draft journal entry and its lines.

        Anything that has left DRAFT is part of the audit trail and
        can only be posted or reversed.
        """
        group = self.get_group(group_id)
        if group.status != TransactionStatus.DRAFT:
            raise ValueError(
                f"Can only delete draft journal entries "
                f"(status: {group.status.value})"
            )
        label = group.reference or group.id
        self.db.delete(group)
        self.db.flush()
        logger.info("Deleted draft journal entry %s", label)

    # --- Balances ---

    def _sums_by_account(
        self,
        from_date: date | None = None,
        as_of: date | None = None,
        account_id: str | None = None,
    ) -> dict[str, dict[TransactionState, Decimal]]:
        query = (
            select(
                LedgerTransaction.ledger_account_id,
                LedgerTransaction.transaction_state,
                func.coalesce(func.sum(LedgerTransaction.amount), 0),
            )
            .where(LedgerTransaction.status.in_(list(BALANCE_STATUSES)))
            .group_by(
                LedgerTransaction.ledger_account_id,
                LedgerTransaction.transaction_state,
            )
        )
        if from_date is not None:
            query = query.where(LedgerTransaction.transaction_date >= from_date)
        if as_of is not None:
            query = query.where(LedgerTransaction.transaction_date <= as_of)
        if account_id is not None:
            query = query.where(LedgerTransaction.ledger_account_id == account_id)

        sums: dict[str, dict[TransactionState, Decimal]] = {}
        for acc_id, state, total in self.db.execute(query):
            sums.setdefault(acc_id, {})[state] = _to_decimal(total)
        return sums

    @staticmethod
    def _signed(account: LedgerAccount, sums: dict[TransactionState, Decimal]) -> Decimal:
        debits = sums.get(TransactionState.DEBIT, Decimal("0"))
        credits = sums.get(TransactionState.CREDIT, Decimal("0"))
        if is_normal_debit(account.ledger_group):
            return debits - credits
        return credits - debits

    def get_account_balance(
        self,
        account_id: str,
        from_date: date | None = None,
        as_of: date | None = None,
    ) -> Decimal:
        """
        Calculate an account's balance from its posted transactions.

        Balance is never stored. For ASSET and EXPENSE accounts it
        is debits - credits; for LIABILITY, EQUITY, INCOME and
        REVENUE it is credits - debits.
        """
        account = self.get_account(account_id)
        sums = self._sums_by_account(from_date, as_of, account_id)
        return self._signed(account, sums.get(account_id, {}))

    def get_account_transactions(
        self,
        account_id: str,
        from_date: date | None = None,
        to_date: date | None = None,
        max: int = 500,
    ) -> list[LedgerTransaction]:
        """An account's transactions in every status, newest first."""
        self.get_account(account_id)
        query = (
            select(LedgerTransaction)
            .where(LedgerTransaction.ledger_account_id == account_id)
            .order_by(
                LedgerTransaction.transaction_date.desc(),
                LedgerTransaction.created_at.desc(),
                LedgerTransaction.position,
            )
            .limit(max)
        )
        if from_date is not None:
            query = query.where(LedgerTransaction.transaction_date >= from_date)
        if to_date is not None:
            query = query.where(LedgerTransaction.transaction_date <= to_date)
        return list(self.db.execute(query).scalars().all())

    def check_integrity(self) -> IntegrityReport:
        """
        Verify that the whole ledger balances.

        Total debits must equal total credits across every
        balance-moving transaction. Posted groups that do not
        balance on their own are listed.
        """
        totals = {TransactionState.DEBIT: Decimal("0"), TransactionState.CREDIT: Decimal("0")}
        for per_state in self._sums_by_account().values():
            for state, amount in per_state.items():
                totals[state] += amount

        posted_groups = self.db.execute(
            select(LedgerTransactionGroup)
            .options(selectinload(LedgerTransactionGroup.transactions))
            .where(LedgerTransactionGroup.status == TransactionStatus.POSTED)
        ).scalars().all()
        unbalanced = [g.id for g in posted_groups if not g.is_balanced]

        total_debits = totals[TransactionState.DEBIT]
        total_credits = totals[TransactionState.CREDIT]
        if total_debits != total_credits or unbalanced:
            logger.warning(
                "Ledger integrity check failed: debits=%s credits=%s unbalanced=%s",
                total_debits, total_credits, unbalanced,
            )
        return IntegrityReport(
            total_debits=total_debits,
            total_credits=total_credits,
            difference=total_debits - total_credits,
            is_balanced=total_debits == total_credits and not unbalanced,
            unbalanced_group_ids=unbalanced,
        )

    # --- Fetch contracts ---

    def fetch_accounts(self, account_filter: AccountFilter | None = None) -> list[LedgerAccountRecord]:
        """
        Account records with balances over the filter's window.

        One grouped query computes every balance, so the cost does
        not grow with the number of accounts.
        """
        account_filter = account_filter or AccountFilter()
        query = select(LedgerAccount).order_by(LedgerAccount.code)
        if account_filter.active_only:
            query = query.where(LedgerAccount.is_active.is_(True))
        if account_filter.ledger_groups:
            query = query.where(LedgerAccount.ledger_group.in_(account_filter.ledger_groups))
        accounts = self.db.execute(query).scalars().all()

        sums = self._sums_by_account(account_filter.from_date, account_filter.as_of)
        return [
            LedgerAccountRecord(
                id=account.id,
                code=account.code,
                name=account.name,
                ledger_group=account.ledger_group,
                parent_account_id=account.parent_account_id,
                currency=account.currency,
                is_active=account.is_active,
                is_cash=account.is_cash,
                cash_flow_activity=account.cash_flow_activity,
                balance=self._signed(account, sums.get(account.id, {})),
            )
            for account in accounts
        ]

    def chart_of_accounts(self, active_only: bool = True) -> ChartOfAccounts:
        return group_accounts(
            self.fetch_accounts(AccountFilter(active_only=active_only)),
            active_only=active_only,
        )

    def fetch_transaction_groups(
        self, transaction_filter: TransactionFilter | None = None
    ) -> list[LedgerTransactionGroupRecord]:
        """Journal entry groups with their lines, newest first."""
        transaction_filter = transaction_filter or TransactionFilter()
        query = (
            select(LedgerTransactionGroup)
            .options(selectinload(LedgerTransactionGroup.transactions))
            .order_by(
                LedgerTransactionGroup.group_date.desc(),
                LedgerTransactionGroup.created_at.desc(),
            )
            .limit(transaction_filter.max)
        )
        if transaction_filter.from_date is not None:
            query = query.where(LedgerTransactionGroup.group_date >= transaction_filter.from_date)
        if transaction_filter.to_date is not None:
            query = query.where(LedgerTransactionGroup.group_date <= transaction_filter.to_date)
        status = parse_status_filter(transaction_filter.status)
        if status is not None:
            query = query.where(LedgerTransactionGroup.status == status)

        groups = self.db.execute(query).scalars().all()
        return [LedgerTransactionGroupRecord.model_validate(g) for g in groups]
