"""
Tests for the trial balance, profit & loss, balance sheet and
cash flow builders.

Account balances are given directly, signed in each account's
normal direction, the way the store hands them over.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_core.engine.formatting import currency_formatter
from ledger_core.engine.statements import (
    CURRENT_EARNINGS_NAME,
    UNCLASSIFIED_MARKER,
    build_balance_sheet,
    build_cash_flow,
    build_profit_and_loss,
    build_trial_balance,
    ending_sides,
)
from ledger_core.errors import MalformedInputError
from ledger_core.models.enums import CashFlowActivity, LedgerGroup
from ledger_core.schemas.diagnostics import DataQualityKind, InvariantKind
from ledger_core.schemas.ledger import LedgerAccountRecord


AS_OF = date(2024, 1, 31)


def account(id_, code, group, balance, name=None, active=True, **extra):
    return LedgerAccountRecord(
        id=id_, code=code, name=name or f"Account {code}", ledger_group=group,
        balance=Decimal(balance), is_active=active, **extra,
    )


def balanced_books():
    """
    Capital 10,000 in; sales 500; rent 200; supplies bought on
    credit 150. Debits and credits both total 10,650.
    """
    return [
        account("cash", "1000", LedgerGroup.ASSET, "10300", "Cash"),
        account("ap", "2000", LedgerGroup.LIABILITY, "150", "Accounts Payable"),
        account("cap", "3000", LedgerGroup.EQUITY, "10000", "Owner's Capital"),
        account("sales", "4000", LedgerGroup.INCOME, "500", "Sales Revenue"),
        account("rent", "6040", LedgerGroup.EXPENSE, "200", "Rent Expense"),
        account("sup", "5400", LedgerGroup.EXPENSE, "150", "Office Supplies"),
    ]


# --- Trial balance ---

class TestTrialBalance:

    def test_cash_sale_scenario(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "500", "Cash"),
            account("sales", "4000", LedgerGroup.INCOME, "500", "Sales Revenue"),
        ]
        tb = build_trial_balance(accounts, AS_OF)

        assert tb.total_debit == Decimal("500")
        assert tb.total_credit == Decimal("500")
        assert tb.difference == 0
        assert tb.is_balanced
        assert tb.violations == []

    def test_balanced_books_are_symmetric(self):
        tb = build_trial_balance(balanced_books(), AS_OF)
        assert tb.total_debit == Decimal("10650")
        assert tb.total_debit - tb.total_credit == 0

    def test_sections_follow_chart_order(self):
        tb = build_trial_balance(balanced_books(), AS_OF)
        assert [s.ledger_group for s in tb.sections] == [
            LedgerGroup.ASSET, LedgerGroup.LIABILITY, LedgerGroup.EQUITY,
            LedgerGroup.INCOME, LedgerGroup.EXPENSE,
        ]
        expense = tb.sections[-1]
        assert [r.code for r in expense.rows] == ["5400", "6040"]
        assert expense.total_debit == Decimal("350")

    def test_zero_balance_accounts_omitted(self):
        accounts = balanced_books() + [account("idle", "1100", LedgerGroup.ASSET, "0")]
        tb = build_trial_balance(accounts, AS_OF)
        codes = [r.code for s in tb.sections for r in s.rows]
        assert "1100" not in codes

    def test_negative_balance_goes_to_opposite_side(self):
        assert ending_sides(LedgerGroup.ASSET, Decimal("-40")) == (0, Decimal("40"))
        assert ending_sides(LedgerGroup.LIABILITY, Decimal("-40")) == (Decimal("40"), 0)
        assert ending_sides(LedgerGroup.REVENUE, Decimal("40")) == (0, Decimal("40"))

    def test_overdrawn_cash_shown_as_credit(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "-100"),
            account("loan", "2100", LedgerGroup.LIABILITY, "-100"),
        ]
        tb = build_trial_balance(accounts, AS_OF)
        rows = {r.code: r for s in tb.sections for r in s.rows}
        assert rows["1000"].ending_credit == Decimal("100")
        assert rows["2100"].ending_debit == Decimal("100")
        assert tb.is_balanced

    def test_imbalance_reported_not_hidden(self):
        accounts = balanced_books() + [account("x", "1900", LedgerGroup.ASSET, "12.5")]
        tb = build_trial_balance(accounts, AS_OF)

        assert tb.difference == Decimal("12.5")
        assert not tb.is_balanced
        (violation,) = tb.violations
        assert violation.kind == InvariantKind.TRIAL_BALANCE_MISMATCH
        assert violation.discrepancy == Decimal("12.5")

    def test_difference_inside_tolerance_counts_as_balanced(self):
        accounts = balanced_books() + [account("x", "1900", LedgerGroup.ASSET, "0.004")]
        tb = build_trial_balance(accounts, AS_OF)
        assert tb.difference == Decimal("0.004")
        assert tb.is_balanced

    def test_inactive_accounts_still_count(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "500", active=False),
            account("sales", "4000", LedgerGroup.INCOME, "500"),
        ]
        assert build_trial_balance(accounts, AS_OF).total_debit == Decimal("500")

    def test_unclassified_account_gets_marker_row(self):
        odd = LedgerAccountRecord(id="odd", code="9999", name="Suspense", ledger_group="CONTRA")
        tb = build_trial_balance(balanced_books() + [odd], AS_OF)

        (row,) = tb.unclassified
        assert row.marker == UNCLASSIFIED_MARKER
        assert row.ending_debit == 0 and row.ending_credit == 0
        assert tb.issues[0].kind == DataQualityKind.UNCLASSIFIED_ACCOUNT
        assert tb.is_balanced

    def test_formatted_totals_only_with_formatter(self):
        assert build_trial_balance(balanced_books(), AS_OF).formatted == {}

        tb = build_trial_balance(balanced_books(), AS_OF, format_currency=currency_formatter("USD"))
        assert tb.formatted["total_debit"] == "$10,650.00"
        assert tb.total_debit == Decimal("10650")

    def test_non_finite_balance_raises(self):
        accounts = balanced_books() + [account("nan", "1999", LedgerGroup.ASSET, "NaN")]
        with pytest.raises(MalformedInputError, match="balance"):
            build_trial_balance(accounts, AS_OF)

    def test_inputs_not_mutated(self):
        accounts = balanced_books()
        before = [a.model_dump() for a in accounts]
        build_trial_balance(accounts, AS_OF)
        assert [a.model_dump() for a in accounts] == before


# --- Profit & loss ---

class TestProfitAndLoss:

    def test_cash_sale_scenario(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "500"),
            account("sales", "4000", LedgerGroup.INCOME, "500"),
        ]
        pl = build_profit_and_loss(accounts, date(2024, 1, 1), date(2024, 1, 31))

        assert pl.total_income == Decimal("500")
        assert pl.total_expenses == 0
        assert pl.net_profit == Decimal("500")

    def test_income_unions_income_and_revenue(self):
        accounts = [
            account("sales", "4000", LedgerGroup.INCOME, "500"),
            account("int", "4500", LedgerGroup.REVENUE, "25"),
            account("rent", "6040", LedgerGroup.EXPENSE, "200"),
        ]
        pl = build_profit_and_loss(accounts, date(2024, 1, 1), date(2024, 1, 31))

        assert [line.code for line in pl.income] == ["4000", "4500"]
        assert pl.total_income == Decimal("525")
        assert pl.total_expenses == Decimal("200")
        assert pl.net_profit == Decimal("325")

    def test_loss_keeps_negative_sign(self):
        accounts = [
            account("sales", "4000", LedgerGroup.INCOME, "100"),
            account("rent", "6040", LedgerGroup.EXPENSE, "350"),
        ]
        pl = build_profit_and_loss(accounts, date(2024, 1, 1), date(2024, 1, 31))
        assert pl.net_profit == Decimal("-250")

    def test_balance_sheet_accounts_ignored(self):
        pl = build_profit_and_loss(balanced_books(), date(2024, 1, 1), date(2024, 1, 31))
        assert {line.code for line in pl.income + pl.expenses} == {"4000", "5400", "6040"}

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError, match="after period end"):
            build_profit_and_loss([], date(2024, 2, 1), date(2024, 1, 1))

    def test_unclassified_account_listed_with_marker(self):
        odd = LedgerAccountRecord(
            id="odd", code="9999", name="Suspense", ledger_group="GADGETS", balance=Decimal("75"),
        )
        pl = build_profit_and_loss(balanced_books() + [odd], date(2024, 1, 1), date(2024, 1, 31))

        (line,) = pl.unclassified
        assert (line.code, line.marker, line.amount) == ("9999", UNCLASSIFIED_MARKER, 0)
        assert line.ledger_group is None
        assert pl.net_profit == Decimal("150")
        assert pl.issues[0].kind == DataQualityKind.UNCLASSIFIED_ACCOUNT

    def test_formatted_uses_currency_settings(self):
        pl = build_profit_and_loss(
            balanced_books(), date(2024, 1, 1), date(2024, 1, 31),
            format_currency=currency_formatter("XOF"),
        )
        assert pl.formatted["net_profit"] == "150 CFA"


# --- Balance sheet ---

class TestBalanceSheet:

    def test_identity_holds_with_current_earnings(self):
        bs = build_balance_sheet(balanced_books(), AS_OF)

        assert bs.total_assets == Decimal("10300")
        assert bs.total_liabilities == Decimal("150")
        assert bs.current_earnings == Decimal("150")
        assert bs.total_equity == Decimal("10150")
        assert bs.total_assets - (bs.total_liabilities + bs.total_equity) == 0
        assert bs.is_balanced
        assert bs.equity[-1].name == CURRENT_EARNINGS_NAME
        assert bs.equity[-1].account_id is None

    def test_without_current_earnings_difference_is_exposed(self):
        bs = build_balance_sheet(balanced_books(), AS_OF, include_current_earnings=False)

        assert bs.difference == Decimal("150")
        assert not bs.is_balanced
        assert bs.violations[0].kind == InvariantKind.BALANCE_SHEET_MISMATCH
        assert all(line.name != CURRENT_EARNINGS_NAME for line in bs.equity)

    def test_no_earnings_line_when_nothing_earned(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "1000"),
            account("cap", "3000", LedgerGroup.EQUITY, "1000"),
        ]
        bs = build_balance_sheet(accounts, AS_OF)
        assert [line.code for line in bs.equity] == ["3000"]
        assert bs.is_balanced

    def test_revenue_alias_counts_towards_earnings(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "40"),
            account("int", "4500", LedgerGroup.REVENUE, "40"),
        ]
        bs = build_balance_sheet(accounts, AS_OF)
        assert bs.current_earnings == Decimal("40")
        assert bs.is_balanced

    def test_lines_sorted_by_code(self):
        accounts = balanced_books() + [account("ar", "1200", LedgerGroup.ASSET, "0")]
        bs = build_balance_sheet(accounts, AS_OF)
        assert [line.code for line in bs.assets] == ["1000", "1200"]

    def test_unclassified_account_listed_with_marker(self):
        odd = LedgerAccountRecord(id="odd", code="9999", name="Suspense", ledger_group="GADGETS")
        bs = build_balance_sheet(balanced_books() + [odd], AS_OF)

        (line,) = bs.unclassified
        assert line.marker == UNCLASSIFIED_MARKER
        assert (line.account_id, line.name, line.balance) == ("odd", "Suspense", 0)
        assert all(line.marker is None for line in bs.assets + bs.liabilities + bs.equity)
        assert bs.is_balanced

    def test_formatted_totals(self):
        bs = build_balance_sheet(balanced_books(), AS_OF, format_currency=currency_formatter("GHS"))
        assert bs.formatted["total_assets"] == "GH₵10,300.00"
        assert bs.formatted["difference"] == "GH₵0.00"


# --- Cash flow ---

PERIOD = (date(2024, 1, 1), date(2024, 1, 31))


def cash_books():
    """balanced_books() with 1000 flagged as the cash account."""
    return [
        account(a.id, a.code, a.ledger_group, a.balance, a.name, is_cash=a.code == "1000")
        for a in balanced_books()
    ]


class TestCashFlow:

    def test_sections_explain_cash_movement(self):
        cf = build_cash_flow(cash_books(), *PERIOD)

        assert {line.code: line.amount for line in cf.operating} == {
            "2000": Decimal("150"),
            "4000": Decimal("500"),
            "5400": Decimal("-150"),
            "6040": Decimal("-200"),
        }
        assert [(line.code, line.amount) for line in cf.financing] == [("3000", Decimal("10000"))]
        assert cf.investing == []
        assert cf.total_operating == Decimal("300")
        assert cf.total_financing == Decimal("10000")
        assert cf.net_cash_flow == Decimal("10300")
        assert cf.closing_cash == Decimal("10300")
        assert cf.is_balanced
        assert cf.violations == []

    def test_opening_cash_carried_into_closing(self):
        cf = build_cash_flow(cash_books(), *PERIOD, opening_cash=Decimal("700"))
        assert cf.opening_cash == Decimal("700")
        assert cf.closing_cash == Decimal("11000")
        assert cf.net_cash_flow == Decimal("10300")

    def test_account_flag_overrides_group_default(self):
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "13000", is_cash=True),
            account("eq", "1500", LedgerGroup.ASSET, "2000", "Equipment",
                    cash_flow_activity=CashFlowActivity.INVESTING),
            account("loan", "2500", LedgerGroup.LIABILITY, "5000", "Bank Loan",
                    cash_flow_activity=CashFlowActivity.FINANCING),
            account("cap", "3000", LedgerGroup.EQUITY, "10000"),
        ]
        cf = build_cash_flow(accounts, *PERIOD)

        assert [(line.code, line.amount, line.activity) for line in cf.investing] == [
            ("1500", Decimal("-2000"), CashFlowActivity.INVESTING),
        ]
        assert [line.code for line in cf.financing] == ["2500", "3000"]
        assert cf.total_financing == Decimal("15000")
        assert cf.operating == []
        assert cf.net_cash_flow == Decimal("13000")
        assert cf.is_balanced

    def test_accounts_without_movement_omitted(self):
        accounts = cash_books() + [account("ar", "1200", LedgerGroup.ASSET, "0")]
        cf = build_cash_flow(accounts, *PERIOD)
        assert "1200" not in {line.code for line in cf.operating + cf.investing + cf.financing}

    def test_second_cash_account_moves_cash_not_flow(self):
        accounts = cash_books() + [
            account("bank", "1010", LedgerGroup.ASSET, "400", "Bank", is_cash=True),
            account("loan", "2500", LedgerGroup.LIABILITY, "400", "Bank Loan",
                    cash_flow_activity=CashFlowActivity.FINANCING),
        ]
        cf = build_cash_flow(accounts, *PERIOD)
        assert "1010" not in {line.code for line in cf.operating + cf.investing + cf.financing}
        assert cf.closing_cash == Decimal("10700")
        assert cf.total_financing == Decimal("10400")
        assert cf.is_balanced

    def test_no_cash_account_reported(self):
        cf = build_cash_flow(balanced_books(), *PERIOD, opening_cash=Decimal("50"))

        assert cf.issues[0].kind == DataQualityKind.NO_CASH_ACCOUNTS
        assert cf.closing_cash == Decimal("50")
        assert cf.net_cash_flow == 0
        assert cf.is_balanced

    def test_unclassified_account_gives_marker_and_mismatch(self):
        odd = LedgerAccountRecord(
            id="odd", code="9999", name="Suspense", ledger_group="GADGETS", balance=Decimal("50"),
        )
        accounts = [
            account("cash", "1000", LedgerGroup.ASSET, "10050", is_cash=True),
            account("cap", "3000", LedgerGroup.EQUITY, "10000"),
            odd,
        ]
        cf = build_cash_flow(accounts, *PERIOD)

        (line,) = cf.unclassified
        assert line.marker == UNCLASSIFIED_MARKER
        assert line.activity is None
        assert cf.difference == Decimal("-50")
        assert not cf.is_balanced
        (violation,) = cf.violations
        assert violation.kind == InvariantKind.CASH_FLOW_MISMATCH
        assert violation.expected == Decimal("10050")
        assert violation.actual == Decimal("10000")

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError, match="after period end"):
            build_cash_flow([], date(2024, 2, 1), date(2024, 1, 1))

    def test_non_finite_opening_cash_raises(self):
        with pytest.raises(MalformedInputError):
            build_cash_flow(cash_books(), *PERIOD, opening_cash=Decimal("Infinity"))

    def test_formatted_totals(self):
        assert build_cash_flow(cash_books(), *PERIOD).formatted == {}

        cf = build_cash_flow(cash_books(), *PERIOD, format_currency=currency_formatter("USD"))
        assert cf.formatted["net_cash_flow"] == "$10,300.00"
        assert cf.formatted["total_investing"] == "$0.00"
