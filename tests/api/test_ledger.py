"""
Tests for ledger API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business logic is tested in
test_ledger_service.py.
"""

from decimal import Decimal


def create_account(client, code, name, group, **extra):
    return client.post("/ledger/accounts", json={
        "code": code, "name": name, "ledger_group": group, **extra,
    })


def journal_entry(debit_id, credit_id, amount="500.00", **extra):
    return {
        "entry_date": "2024-01-15",
        "description": "Cash sale",
        "lines": [
            {"account_id": debit_id, "debit_amount": amount},
            {"account_id": credit_id, "credit_amount": amount},
        ],
        **extra,
    }


class TestAccounts:

    def test_create_account_returns_201(self, client):
        response = create_account(client, "1000", "Cash", "ASSET")
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "1000"
        assert data["ledger_group"] == "ASSET"
        assert data["is_active"] is True
        assert data["is_cash"] is False
        assert data["cash_flow_activity"] is None

    def test_create_cash_account(self, client):
        response = create_account(client, "1010", "Bank", "ASSET", is_cash=True)
        assert response.json()["is_cash"] is True

    def test_create_account_with_cash_flow_activity(self, client):
        response = create_account(
            client, "1600", "Equipment", "ASSET", cash_flow_activity="INVESTING",
        )
        assert response.json()["cash_flow_activity"] == "INVESTING"

    def test_duplicate_code_returns_400(self, client):
        create_account(client, "1000", "Cash", "ASSET")
        response = create_account(client, "1000", "Cash Again", "ASSET")
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_unknown_ledger_group_returns_422(self, client):
        response = create_account(client, "1000", "Cash", "GADGETS")
        assert response.status_code == 422

    def test_list_accounts(self, client, chart):
        data = client.get("/ledger/accounts").json()
        assert [a["code"] for a in data][:2] == ["1000", "1200"]

    def test_patch_deactivates(self, client, chart):
        response = client.patch(
            f"/ledger/accounts/{chart['1200'].id}", json={"is_active": False},
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        codes = [a["code"] for a in client.get("/ledger/accounts?active_only=true").json()]
        assert "1200" not in codes

    def test_delete_unused_account_returns_204(self, client, chart):
        response = client.delete(f"/ledger/accounts/{chart['1200'].id}")
        assert response.status_code == 204

    def test_delete_unknown_account_returns_404(self, client):
        assert client.delete("/ledger/accounts/missing").status_code == 404

    def test_delete_account_with_history_returns_400(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))
        response = client.delete(f"/ledger/accounts/{chart['1000'].id}")
        assert response.status_code == 400

    def test_chart_of_accounts_grouped(self, client, chart):
        data = client.get("/ledger/chart-of-accounts").json()
        groups = [c["ledger_group"] for c in data["categories"]]
        assert groups == ["ASSET", "LIABILITY", "EQUITY", "INCOME", "REVENUE", "EXPENSE"]


class TestJournalEntries:

    def test_create_and_post(self, client, chart):
        response = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, reference="JE-100", post=True,
        ))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "POSTED"
        assert data["is_balanced"] is True
        assert Decimal(data["total_debit"]) == Decimal("500")
        assert len(data["transactions"]) == 2

    def test_line_with_both_sides_returns_422(self, client, chart):
        payload = journal_entry(chart["1000"].id, chart["4000"].id)
        payload["lines"][0]["credit_amount"] = "1.00"
        response = client.post("/ledger/journal-entries", json=payload)
        assert response.status_code == 422

    def test_unknown_account_returns_400(self, client, chart):
        response = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, "missing",
        ))
        assert response.status_code == 400

    def test_unbalanced_post_returns_400(self, client, chart):
        payload = journal_entry(chart["1000"].id, chart["4000"].id)
        payload["lines"][1]["credit_amount"] = "400.00"
        group = client.post("/ledger/journal-entries", json=payload).json()

        response = client.post(f"/ledger/journal-entries/{group['id']}/post")
        assert response.status_code == 400
        assert "does not balance" in response.json()["detail"]

    def test_submit_then_post(self, client, chart):
        group = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id,
        )).json()
        assert group["status"] == "DRAFT"

        submitted = client.post(f"/ledger/journal-entries/{group['id']}/submit").json()
        assert submitted["status"] == "PENDING"
        posted = client.post(f"/ledger/journal-entries/{group['id']}/post").json()
        assert posted["status"] == "POSTED"

    def test_reverse(self, client, chart):
        group = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, reference="JE-200", post=True,
        )).json()

        response = client.post(
            f"/ledger/journal-entries/{group['id']}/reverse?reversal_date=2024-01-20",
        )
        assert response.status_code == 200
        reversal = response.json()
        assert reversal["reference"] == "REV-JE-200"
        assert reversal["reversal_of_id"] == group["id"]

        original = client.get(f"/ledger/journal-entries/{group['id']}").json()
        assert original["status"] == "REVERSED"

    def test_reverse_with_taken_reversal_reference_returns_400(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, reference="REV-JE-1", post=True,
        ))
        group = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, reference="JE-1", post=True,
        )).json()

        response = client.post(f"/ledger/journal-entries/{group['id']}/reverse")
        assert response.status_code == 400
        assert "already in use" in response.json()["detail"]
        original = client.get(f"/ledger/journal-entries/{group['id']}").json()
        assert original["status"] == "POSTED"

    def test_delete_draft_returns_204(self, client, chart):
        group = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id,
        )).json()

        assert client.delete(f"/ledger/journal-entries/{group['id']}").status_code == 204
        assert client.get(f"/ledger/journal-entries/{group['id']}").status_code == 404

    def test_delete_posted_returns_400(self, client, chart):
        group = client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        )).json()

        response = client.delete(f"/ledger/journal-entries/{group['id']}")
        assert response.status_code == 400
        assert "Can only delete draft" in response.json()["detail"]

    def test_delete_unknown_entry_returns_404(self, client):
        assert client.delete("/ledger/journal-entries/missing").status_code == 404

    def test_get_unknown_entry_returns_404(self, client):
        assert client.get("/ledger/journal-entries/missing").status_code == 404

    def test_list_with_status_filter(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(chart["1000"].id, chart["4000"].id))
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))

        data = client.get("/ledger/journal-entries?status=DRAFT").json()
        assert [g["status"] for g in data] == ["DRAFT"]
        assert client.get("/ledger/journal-entries?status=LOST").status_code == 400


class TestBalancesAndIntegrity:

    def test_account_balance(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))
        data = client.get(f"/ledger/accounts/{chart['4000'].id}/balance").json()
        assert Decimal(data["balance"]) == Decimal("500")
        assert data["ledger_group"] == "INCOME"

    def test_balance_before_entry_date(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))
        data = client.get(
            f"/ledger/accounts/{chart['1000'].id}/balance?as_of=2024-01-14",
        ).json()
        assert Decimal(data["balance"]) == 0

    def test_balance_unknown_account_returns_404(self, client):
        assert client.get("/ledger/accounts/missing/balance").status_code == 404

    def test_integrity(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))
        data = client.get("/ledger/integrity").json()
        assert data["is_balanced"] is True
        assert Decimal(data["total_debits"]) == Decimal("500")

    def test_account_transactions(self, client, chart):
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["1000"].id, chart["4000"].id, post=True,
        ))
        client.post("/ledger/journal-entries", json=journal_entry(
            chart["6040"].id, chart["1000"].id, amount="80.00",
        ))

        response = client.get(f"/ledger/accounts/{chart['1000'].id}/transactions")
        assert response.status_code == 200
        data = response.json()
        assert sorted(Decimal(t["amount"]) for t in data) == [Decimal("80"), Decimal("500")]
        assert {t["status"] for t in data} == {"POSTED", "DRAFT"}
        assert all(t["ledger_account_id"] == chart["1000"].id for t in data)
        assert all(t["group_id"] for t in data)

    def test_account_transactions_unknown_account_returns_404(self, client):
        assert client.get("/ledger/accounts/missing/transactions").status_code == 404
