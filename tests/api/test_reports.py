"""
Tests for report endpoints.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def posted_books(client, chart):
    """Capital in, a cash sale and rent paid, all in January 2024."""
    entries = [
        ("1000", "3000", "10000.00", "2024-01-02"),
        ("1000", "4000", "500.00", "2024-01-10"),
        ("6040", "1000", "200.00", "2024-01-15"),
    ]
    for debit, credit, amount, day in entries:
        response = client.post("/ledger/journal-entries", json={
            "entry_date": day,
            "description": "Entry",
            "post": True,
            "lines": [
                {"account_id": chart[debit].id, "debit_amount": amount},
                {"account_id": chart[credit].id, "credit_amount": amount},
            ],
        })
        assert response.status_code == 201
    return chart


class TestTrialBalanceEndpoint:

    def test_balanced(self, client, posted_books):
        data = client.get("/reports/trial-balance?as_of=2024-01-31").json()
        assert Decimal(data["total_debit"]) == Decimal("10500")
        assert Decimal(data["total_credit"]) == Decimal("10500")
        assert data["is_balanced"] is True
        assert data["violations"] == []

    def test_formatted_when_currency_given(self, client, posted_books):
        data = client.get("/reports/trial-balance?as_of=2024-01-31&currency=USD").json()
        assert data["formatted"]["total_debit"] == "$10,500.00"


class TestProfitLossEndpoint:

    def test_period(self, client, posted_books):
        data = client.get(
            "/reports/profit-loss?period_start=2024-01-01&period_end=2024-01-31",
        ).json()
        assert Decimal(data["net_profit"]) == Decimal("300")

    def test_period_required(self, client):
        assert client.get("/reports/profit-loss").status_code == 422

    def test_start_after_end_returns_400(self, client):
        response = client.get(
            "/reports/profit-loss?period_start=2024-02-01&period_end=2024-01-01",
        )
        assert response.status_code == 400


class TestBalanceSheetEndpoint:

    def test_balanced_with_current_earnings(self, client, posted_books):
        data = client.get("/reports/balance-sheet?as_of=2024-01-31").json()
        assert Decimal(data["total_assets"]) == Decimal("10300")
        assert Decimal(data["current_earnings"]) == Decimal("300")
        assert Decimal(data["difference"]) == 0
        assert data["is_balanced"] is True

    def test_difference_shown_without_current_earnings(self, client, posted_books):
        data = client.get(
            "/reports/balance-sheet?as_of=2024-01-31&include_current_earnings=false",
        ).json()
        assert Decimal(data["difference"]) == Decimal("300")
        assert data["violations"][0]["kind"] == "BALANCE_SHEET_MISMATCH"


class TestCashFlowEndpoint:

    def test_january(self, client, posted_books):
        data = client.get(
            "/reports/cash-flow?period_start=2024-01-01&period_end=2024-01-31",
        ).json()
        operating = {line["code"]: Decimal(line["amount"]) for line in data["operating"]}
        assert operating == {"4000": Decimal("500"), "6040": Decimal("-200")}
        assert [line["code"] for line in data["financing"]] == ["3000"]
        assert Decimal(data["total_operating"]) == Decimal("300")
        assert Decimal(data["total_financing"]) == Decimal("10000")
        assert Decimal(data["total_investing"]) == 0
        assert Decimal(data["net_cash_flow"]) == Decimal("10300")
        assert Decimal(data["opening_cash"]) == 0
        assert Decimal(data["closing_cash"]) == Decimal("10300")
        assert data["is_balanced"] is True
        assert data["financing"][0]["activity"] == "FINANCING"

    def test_formatted_when_currency_given(self, client, posted_books):
        data = client.get(
            "/reports/cash-flow?period_start=2024-01-11&period_end=2024-01-31&currency=USD",
        ).json()
        assert data["formatted"]["opening_cash"] == "$10,500.00"
        assert data["formatted"]["closing_cash"] == "$10,300.00"

    def test_period_required(self, client):
        assert client.get("/reports/cash-flow").status_code == 422

    def test_start_after_end_returns_400(self, client):
        response = client.get(
            "/reports/cash-flow?period_start=2024-02-01&period_end=2024-01-01",
        )
        assert response.status_code == 400


class TestAgingEndpoint:

    def test_receivables(self, client):
        client.post("/open-items", json={
            "item_type": "INVOICE",
            "document_number": "INV-1",
            "entity_id": "c1",
            "entity_name": "Acme",
            "issue_date": "2024-01-01",
            "due_date": "2024-01-31",
            "amount": "250.00",
        })
        data = client.get("/reports/aging/receivables?as_of=2024-03-15").json()
        assert data["kind"] == "RECEIVABLES"
        assert Decimal(data["items"][0]["days60"]) == Decimal("250")

    def test_unknown_kind_returns_404(self, client):
        assert client.get("/reports/aging/inventory").status_code == 404
