"""
Tests for the unified transaction register endpoint and the
structured error returned for malformed stored amounts.
"""

from datetime import date
from decimal import Decimal

from ledger_core.config import get_settings
from ledger_core.models.enums import TransactionState, TransactionStatus
from ledger_core.models.ledger_transaction import LedgerTransaction
from ledger_core.models.ledger_transaction_group import LedgerTransactionGroup


def test_register_lists_journal_and_voucher_lines(client, chart):
    client.post("/ledger/journal-entries", json={
        "entry_date": "2024-01-15",
        "description": "Cash sale",
        "reference": "JE-1",
        "post": True,
        "lines": [
            {"account_id": chart["1000"].id, "debit_amount": "500"},
            {"account_id": chart["4000"].id, "credit_amount": "500"},
        ],
    })
    client.post("/vouchers", json={
        "voucher_type": "PAYMENT",
        "voucher_date": "2024-01-20",
        "amount": "150",
        "cash_account_id": chart["1000"].id,
        "expense_account_id": chart["5400"].id,
    })

    response = client.get("/transactions")
    assert response.status_code == 200
    data = response.json()
    assert [line["source_type"] for line in data["lines"]] == [
        "PAYMENT", "PAYMENT", "JOURNAL_ENTRY", "JOURNAL_ENTRY",
    ]
    assert Decimal(data["total_debit"]) == Decimal("650")


def test_register_status_filter(client, chart):
    client.post("/vouchers", json={
        "voucher_type": "PAYMENT",
        "voucher_date": "2024-01-20",
        "amount": "150",
        "cash_account_id": chart["1000"].id,
        "expense_account_id": chart["5400"].id,
    })
    data = client.get("/transactions?status=POSTED").json()
    assert data["lines"] == []


def test_register_serves_sample_data_when_enabled(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "USE_MOCK_DATA", True)

    data = client.get("/transactions").json()
    assert len(data["lines"]) == 12
    assert data["lines"][0]["transaction_id"] == "JE-00001"


def test_sample_data_respects_query_filters(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "USE_MOCK_DATA", True)

    data = client.get("/transactions?status=POSTED").json()
    assert len(data["lines"]) == 4
    assert {line["status"] for line in data["lines"]} == {"POSTED"}

    data = client.get("/transactions?to_date=2023-10-21").json()
    assert {line["transaction_id"] for line in data["lines"]} == {"JE-00003", "PV-00077"}

    assert client.get("/transactions?status=LOST").status_code == 400


def test_malformed_stored_amount_returns_422(client, chart, db_session):
    group = LedgerTransactionGroup(
        group_date=date(2024, 1, 15),
        description="Imported",
        status=TransactionStatus.DRAFT,
    )
    group.transactions.append(LedgerTransaction(
        transaction_date=date(2024, 1, 15),
        description="",
        amount=Decimal("-5"),
        transaction_state=TransactionState.DEBIT,
        ledger_account_id=chart["1000"].id,
        status=TransactionStatus.DRAFT,
        position=0,
    ))
    db_session.add(group)
    db_session.commit()

    response = client.get("/transactions")
    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "MALFORMED_INPUT"
    assert body["record_type"] == "LedgerTransaction"
    assert body["field"] == "amount"
