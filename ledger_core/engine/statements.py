"""
Statement builders: trial balance, profit & loss, balance sheet
and cash flow.

Each builder takes account records whose balance already covers
the requested window and returns a report object. Nothing is
mutated and nothing is rounded; display strings are only
produced through the optional format_currency callable.

Cross-checks never raise. A trial balance that does not balance
still comes back, with the discrepancy in `difference` and an
InvariantViolation attached.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import date
from decimal import Decimal

from ledger_core.engine.aggregator import (
    account_balance,
    group_accounts,
    income_groups,
    is_normal_debit,
)
from ledger_core.engine.numeric import ZERO, require_finite
from ledger_core.models.enums import (
    DEFAULT_CASH_FLOW_ACTIVITY,
    CashFlowActivity,
    LedgerGroup,
)
from ledger_core.schemas.diagnostics import (
    DataQualityIssue,
    DataQualityKind,
    InvariantKind,
    InvariantViolation,
)
from ledger_core.schemas.ledger import LedgerAccountRecord
from ledger_core.schemas.reports import (
    BalanceSheet,
    BalanceSheetLine,
    CashFlowLine,
    CashFlowStatement,
    ProfitLoss,
    ProfitLossLine,
    TrialBalance,
    TrialBalanceRow,
    TrialBalanceSection,
)


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")
UNCLASSIFIED_MARKER = "UNCLASSIFIED_ACCOUNT"
CURRENT_EARNINGS_NAME = "Current Period Earnings"

Formatter = Callable[[Decimal], str]


def _format_totals(format_currency: Formatter | None, **amounts: Decimal) -> dict[str, str]:
    if format_currency is None:
        return {}
    return {key: format_currency(value) for key, value in amounts.items()}


def ending_sides(group: LedgerGroup, balance: Decimal) -> tuple[Decimal, Decimal]:
    """
    Split a normal-signed balance into (ending_debit, ending_credit).

    A positive balance sits on the group's normal side; a
    negative one is shown on the opposite side.
    """
    if is_normal_debit(group):
        return (balance, ZERO) if balance >= 0 else (ZERO, -balance)
    return (ZERO, balance) if balance >= 0 else (-balance, ZERO)


def build_trial_balance(
    accounts: Iterable[LedgerAccountRecord],
    as_of: date,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    format_currency: Formatter | None = None,
) -> TrialBalance:
    """
    One row per account with a non-zero ending side, grouped
    by ledger group in chart-of-accounts order.

    Inactive accounts are included: deactivating an account
    does not remove its balance from the books.
    """
    chart = group_accounts(accounts, active_only=False)

    sections = []
    total_debit = ZERO
    total_credit = ZERO
    for category in chart.categories:
        rows = []
        for account in category.accounts:
            debit, credit = ending_sides(category.ledger_group, account_balance(account))
            if debit == 0 and credit == 0:
                continue
            rows.append(TrialBalanceRow(
                account_id=account.id,
                code=account.code,
                name=account.name,
                currency=account.currency,
                ledger_group=category.ledger_group,
                ending_debit=debit,
                ending_credit=credit,
            ))
        if not rows:
            continue
        section_debit = sum((r.ending_debit for r in rows), ZERO)
        section_credit = sum((r.ending_credit for r in rows), ZERO)
        total_debit += section_debit
        total_credit += section_credit
        sections.append(TrialBalanceSection(
            ledger_group=category.ledger_group,
            rows=rows,
            total_debit=section_debit,
            total_credit=section_credit,
        ))

    unclassified = [
        TrialBalanceRow(
            account_id=account.id,
            code=account.code,
            name=account.name,
            currency=account.currency,
            ledger_group=None,
            marker=UNCLASSIFIED_MARKER,
        )
        for account in chart.unclassified
    ]

    difference = total_debit - total_credit
    is_balanced = abs(difference) < tolerance
    violations = []
    if not is_balanced:
        violations.append(InvariantViolation(
            kind=InvariantKind.TRIAL_BALANCE_MISMATCH,
            expected=total_debit,
            actual=total_credit,
            discrepancy=difference,
        ))
        logger.warning(
            "Trial balance as of %s is out by %s (debits %s, credits %s)",
            as_of, difference, total_debit, total_credit,
        )

    return TrialBalance(
        as_of=as_of,
        sections=sections,
        unclassified=unclassified,
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=is_balanced,
        issues=chart.issues,
        violations=violations,
        formatted=_format_totals(
            format_currency,
            total_debit=total_debit,
            total_credit=total_credit,
            difference=difference,
        ),
    )


def _pl_lines(chart, groups) -> list[ProfitLossLine]:
    lines = []
    for category in chart.categories:
        if category.ledger_group not in groups:
            continue
        for account in category.accounts:
            lines.append(ProfitLossLine(
                account_id=account.id,
                code=account.code,
                name=account.name,
                ledger_group=category.ledger_group,
                amount=account_balance(account),
            ))
    return lines


def build_profit_and_loss(
    accounts: Iterable[LedgerAccountRecord],
    period_start: date,
    period_end: date,
    format_currency: Formatter | None = None,
) -> ProfitLoss:
    """
    Income (INCOME and REVENUE) against expenses for a period.

    Account balances must already be restricted to the period.
    A loss shows as a negative net_profit.
    """
    if period_start > period_end:
        raise ValueError(
            f"Period start {period_start} is after period end {period_end}"
        )

    chart = group_accounts(accounts, active_only=False)
    income = _pl_lines(chart, income_groups())
    expenses = _pl_lines(chart, {LedgerGroup.EXPENSE})

    total_income = sum((line.amount for line in income), ZERO)
    total_expenses = sum((line.amount for line in expenses), ZERO)
    net_profit = total_income - total_expenses
    unclassified = [
        ProfitLossLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            ledger_group=None,
            marker=UNCLASSIFIED_MARKER,
        )
        for account in chart.unclassified
    ]

    return ProfitLoss(
        period_start=period_start,
        period_end=period_end,
        income=income,
        expenses=expenses,
        unclassified=unclassified,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=net_profit,
        issues=chart.issues,
        formatted=_format_totals(
            format_currency,
            total_income=total_income,
            total_expenses=total_expenses,
            net_profit=net_profit,
        ),
    )


def _bs_lines(chart, group: LedgerGroup) -> list[BalanceSheetLine]:
    category = chart.category(group)
    if category is None:
        return []
    return [
        BalanceSheetLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            balance=account_balance(account),
        )
        for account in category.accounts
    ]


def current_earnings(chart) -> Decimal:
    """Income minus expenses not yet closed into retained earnings."""
    earnings = ZERO
    for category in chart.categories:
        if category.ledger_group in income_groups():
            earnings += category.total
        elif category.ledger_group == LedgerGroup.EXPENSE:
            earnings -= category.total
    return earnings


def build_balance_sheet(
    accounts: Iterable[LedgerAccountRecord],
    as_of: date,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    include_current_earnings: bool = True,
    format_currency: Formatter | None = None,
) -> BalanceSheet:
    """
    Assets, liabilities and equity at a single date.

    Until the books are closed, profit for the period still sits
    in income and expense accounts. With include_current_earnings
    it is added to equity as a synthetic line so the accounting
    equation can hold; without it the difference will show.
    """
    chart = group_accounts(accounts, active_only=False)

    assets = _bs_lines(chart, LedgerGroup.ASSET)
    liabilities = _bs_lines(chart, LedgerGroup.LIABILITY)
    equity = _bs_lines(chart, LedgerGroup.EQUITY)

    earnings = current_earnings(chart)
    if include_current_earnings and earnings != 0:
        equity.append(BalanceSheetLine(
            account_id=None,
            code=None,
            name=CURRENT_EARNINGS_NAME,
            balance=earnings,
        ))

    unclassified = [
        BalanceSheetLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            marker=UNCLASSIFIED_MARKER,
        )
        for account in chart.unclassified
    ]

    total_assets = sum((line.balance for line in assets), ZERO)
    total_liabilities = sum((line.balance for line in liabilities), ZERO)
    total_equity = sum((line.balance for line in equity), ZERO)
    difference = total_assets - (total_liabilities + total_equity)
    is_balanced = abs(difference) < tolerance

    violations = []
    if not is_balanced:
        violations.append(InvariantViolation(
            kind=InvariantKind.BALANCE_SHEET_MISMATCH,
            expected=total_assets,
            actual=total_liabilities + total_equity,
            discrepancy=difference,
        ))
        logger.warning(
            "Balance sheet as of %s is out by %s", as_of, difference,
        )

    return BalanceSheet(
        as_of=as_of,
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        unclassified=unclassified,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        current_earnings=earnings,
        difference=difference,
        is_balanced=is_balanced,
        issues=chart.issues,
        violations=violations,
        formatted=_format_totals(
            format_currency,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            difference=difference,
        ),
    )


def cash_effect(group: LedgerGroup, balance: Decimal) -> Decimal:
    """
    Cash released (+) or absorbed (-) by a non-cash account's movement.

    Every entry balances, so whatever is credited outside the cash
    accounts is debited to cash. For normal-credit groups that is the
    balance itself; for ASSET and EXPENSE it is the balance negated.
    """
    if is_normal_debit(group):
        return -balance
    return balance


def build_cash_flow(
    accounts: Iterable[LedgerAccountRecord],
    period_start: date,
    period_end: date,
    opening_cash: Decimal = ZERO,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    format_currency: Formatter | None = None,
) -> CashFlowStatement:
    """
    Where cash came from and went to over a period.

    Account balances must already be restricted to the period, as
    for the P&L. Accounts flagged is_cash are the cash itself: their
    combined movement is what the three sections have to explain,
    and opening_cash plus that movement is closing_cash. Every other
    account with movement gives one line in the section named by its
    cash_flow_activity, or by its ledger group's default.

    A difference between net_cash_flow and the cash movement only
    arises from unclassified accounts or unbalanced input, and is
    reported as a CASH_FLOW_MISMATCH violation.
    """
    if period_start > period_end:
        raise ValueError(
            f"Period start {period_start} is after period end {period_end}"
        )
    opening_cash = require_finite(opening_cash, "CashFlowStatement", None, "opening_cash")

    chart = group_accounts(accounts, active_only=False)
    issues = list(chart.issues)

    sections: dict[CashFlowActivity, list[CashFlowLine]] = {
        activity: [] for activity in CashFlowActivity
    }
    cash_movement = ZERO
    cash_accounts = 0
    for category in chart.categories:
        for account in category.accounts:
            effect = cash_effect(category.ledger_group, account_balance(account))
            if account.is_cash:
                cash_accounts += 1
                cash_movement -= effect
                continue
            if effect == 0:
                continue
            activity = (
                account.cash_flow_activity
                or DEFAULT_CASH_FLOW_ACTIVITY[category.ledger_group]
            )
            sections[activity].append(CashFlowLine(
                account_id=account.id,
                code=account.code,
                name=account.name,
                ledger_group=category.ledger_group,
                activity=activity,
                amount=effect,
            ))

    if not cash_accounts:
        issues.append(DataQualityIssue(
            kind=DataQualityKind.NO_CASH_ACCOUNTS,
            record_type="LedgerAccount",
            message="No account is flagged as cash; closing cash equals opening cash",
        ))

    unclassified = [
        CashFlowLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            ledger_group=None,
            activity=None,
            marker=UNCLASSIFIED_MARKER,
        )
        for account in chart.unclassified
    ]

    operating = sections[CashFlowActivity.OPERATING]
    investing = sections[CashFlowActivity.INVESTING]
    financing = sections[CashFlowActivity.FINANCING]
    total_operating = sum((line.amount for line in operating), ZERO)
    total_investing = sum((line.amount for line in investing), ZERO)
    total_financing = sum((line.amount for line in financing), ZERO)
    net_cash_flow = total_operating + total_investing + total_financing
    closing_cash = opening_cash + cash_movement

    difference = net_cash_flow - cash_movement
    is_balanced = abs(difference) < tolerance
    violations = []
    if not is_balanced:
        violations.append(InvariantViolation(
            kind=InvariantKind.CASH_FLOW_MISMATCH,
            expected=cash_movement,
            actual=net_cash_flow,
            discrepancy=difference,
        ))
        logger.warning(
            "Cash flow %s to %s is out by %s (activities %s, cash accounts %s)",
            period_start, period_end, difference, net_cash_flow, cash_movement,
        )

    return CashFlowStatement(
        period_start=period_start,
        period_end=period_end,
        operating=operating,
        investing=investing,
        financing=financing,
        unclassified=unclassified,
        total_operating=total_operating,
        total_investing=total_investing,
        total_financing=total_financing,
        net_cash_flow=net_cash_flow,
        opening_cash=opening_cash,
        closing_cash=closing_cash,
        difference=difference,
        is_balanced=is_balanced,
        issues=issues,
        violations=violations,
        formatted=_format_totals(
            format_currency,
            total_operating=total_operating,
            total_investing=total_investing,
            total_financing=total_financing,
            net_cash_flow=net_cash_flow,
            opening_cash=opening_cash,
            closing_cash=closing_cash,
        ),
    )
