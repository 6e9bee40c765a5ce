"""
Chart-of-accounts aggregation.

Groups accounts by ledger group in a fixed order, sorts each
group by account code and sums the stored balances. Balances
are taken as given; recomputing them from history is the
store's job, not this module's.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from ledger_core.engine.numeric import require_finite
from ledger_core.models.enums import LedgerGroup, NORMAL_DEBIT_GROUPS, INCOME_GROUPS
from ledger_core.schemas.diagnostics import DataQualityIssue, DataQualityKind
from ledger_core.schemas.ledger import LedgerAccountRecord, parse_ledger_group
from ledger_core.schemas.reports import AccountCategory, ChartOfAccounts


logger = logging.getLogger(__name__)

LEDGER_GROUP_ORDER: tuple[LedgerGroup, ...] = (
    LedgerGroup.ASSET,
    LedgerGroup.LIABILITY,
    LedgerGroup.EQUITY,
    LedgerGroup.INCOME,
    LedgerGroup.REVENUE,
    LedgerGroup.EXPENSE,
)


class AccountIndex:
    """
    Lookup of account records by id.

    Transactions and vouchers hold account ids, never account
    objects; this is where those ids are resolved.
    """

    def __init__(self, accounts: Iterable[LedgerAccountRecord] = ()):
        self._by_id: dict[str, LedgerAccountRecord] = {}
        for account in accounts:
            self._by_id[account.id] = account

    @classmethod
    def of(cls, accounts) -> "AccountIndex":
        if isinstance(accounts, AccountIndex):
            return accounts
        return cls(accounts or ())

    def get(self, account_id: str | None) -> LedgerAccountRecord | None:
        if account_id is None:
            return None
        return self._by_id.get(account_id)

    def require(self, account_id: str) -> LedgerAccountRecord:
        account = self.get(account_id)
        if account is None:
            raise ValueError(f"Account {account_id} not found")
        return account

    def __contains__(self, account_id) -> bool:
        return account_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self):
        return iter(self._by_id.values())


def is_normal_debit(group: LedgerGroup) -> bool:
    return group in NORMAL_DEBIT_GROUPS


def income_groups() -> frozenset[LedgerGroup]:
    """INCOME and REVENUE are unioned wherever income is reported."""
    return INCOME_GROUPS


def account_balance(account: LedgerAccountRecord) -> Decimal:
    """The stored balance as a finite Decimal."""
    return require_finite(account.balance, "LedgerAccount", account.id, "balance")


def unclassified_issue(account: LedgerAccountRecord) -> DataQualityIssue:
    return DataQualityIssue(
        kind=DataQualityKind.UNCLASSIFIED_ACCOUNT,
        record_type="LedgerAccount",
        record_id=account.id,
        message=f"Account {account.code} has no recognised ledger group",
    )


def group_accounts(
    accounts: Iterable[LedgerAccountRecord],
    active_only: bool = True,
) -> ChartOfAccounts:
    """
    Partition accounts into ordered ledger-group categories.

    Empty categories are left out. Accounts whose ledger group
    could not be recognised are returned in `unclassified` with
    a matching data-quality issue.
    """
    buckets: dict[LedgerGroup, list[LedgerAccountRecord]] = {
        group: [] for group in LEDGER_GROUP_ORDER
    }
    unclassified = []
    issues = []

    for account in accounts:
        if active_only and not account.is_active:
            continue
        account_balance(account)
        group = parse_ledger_group(account.ledger_group)
        if group is None:
            unclassified.append(account)
            issues.append(unclassified_issue(account))
            continue
        buckets[group].append(account)

    categories = []
    for group in LEDGER_GROUP_ORDER:
        members = buckets[group]
        if not members:
            continue
        members.sort(key=lambda a: a.code)
        categories.append(AccountCategory(
            ledger_group=group,
            accounts=members,
            total=sum((account_balance(a) for a in members), Decimal("0")),
        ))

    for issue in issues:
        logger.warning("Unclassified account %s: %s", issue.record_id, issue.message)

    return ChartOfAccounts(
        categories=categories,
        unclassified=unclassified,
        issues=issues,
    )
