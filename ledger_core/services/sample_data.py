"""
Sample records for demos and front-end development.

Served instead of the database when USE_MOCK_DATA is enabled.
They are source records, not register lines, so they go
through the unifier exactly like real data.
"""

from datetime import date
from decimal import Decimal

from ledger_core.models.enums import LedgerGroup, TransactionState, VoucherTo, VoucherType
from ledger_core.schemas.ledger import (
    LedgerAccountRecord,
    LedgerTransactionGroupRecord,
    LedgerTransactionRecord,
)
from ledger_core.schemas.voucher import VoucherRecord


def sample_accounts() -> list[LedgerAccountRecord]:
    rows = [
        ("acc-cash", "1010", "Cash", LedgerGroup.ASSET),
        ("acc-accdep", "1500", "Accumulated Depreciation", LedgerGroup.ASSET),
        ("acc-interest", "2200", "Accrued Interest", LedgerGroup.LIABILITY),
        ("acc-sales", "4010", "Sales Revenue", LedgerGroup.INCOME),
        ("acc-deprec", "5400", "Depreciation Expense", LedgerGroup.EXPENSE),
        ("acc-office", "6010", "Office Expenses", LedgerGroup.EXPENSE),
        ("acc-software", "6020", "Software Expenses", LedgerGroup.EXPENSE),
        ("acc-rent", "6040", "Rent Expense", LedgerGroup.EXPENSE),
    ]
    return [
        LedgerAccountRecord(id=id_, code=code, name=name, ledger_group=group)
        for id_, code, name, group in rows
    ]


def _group(id_, reference, day, description, status, legs) -> LedgerTransactionGroupRecord:
    return LedgerTransactionGroupRecord(
        id=id_,
        group_date=day,
        description=description,
        reference=reference,
        status=status,
        transactions=[
            LedgerTransactionRecord(
                id=f"{id_}-tx{position}",
                transaction_date=day,
                amount=Decimal(amount),
                transaction_state=state,
                ledger_account_id=account_id,
                status=status,
                group_id=id_,
            )
            for position, (account_id, state, amount) in enumerate(legs)
        ],
    )


def sample_transaction_groups() -> list[LedgerTransactionGroupRecord]:
    debit, credit = TransactionState.DEBIT, TransactionState.CREDIT
    return [
        _group(
            "je-1", "JE-00001", date(2023, 10, 26), "Office Supplies Purchase", "DRAFT",
            [("acc-office", debit, "500.00"), ("acc-cash", credit, "500.00")],
        ),
        _group(
            "je-2", "JE-00002", date(2023, 10, 23), "Monthly Depreciation Entry", "POSTED",
            [("acc-deprec", debit, "1200.00"), ("acc-accdep", credit, "1200.00")],
        ),
        _group(
            "je-3", "JE-00003", date(2023, 10, 20), "Accrued Interest Reversal", "REVERSED",
            [("acc-interest", debit, "350.00"), ("acc-cash", credit, "350.00")],
        ),
    ]


def sample_vouchers() -> list[VoucherRecord]:
    return [
        VoucherRecord(
            id="v-2",
            voucher_number="RV-00042",
            voucher_type=VoucherType.RECEIPT,
            voucher_to=VoucherTo.CLIENT,
            voucher_date=date(2023, 10, 25),
            description="Client Payment Received - Invoice INV-2023-089",
            amount=Decimal("2500.00"),
            cash_account_id="acc-cash",
            income_account_id="acc-sales",
            status="POSTED",
        ),
        VoucherRecord(
            id="v-4",
            voucher_number="PV-00078",
            voucher_type=VoucherType.PAYMENT,
            voucher_to=VoucherTo.VENDOR,
            voucher_date=date(2023, 10, 24),
            description="Software Subscription - Adobe Creative Cloud",
            amount=Decimal("150.00"),
            cash_account_id="acc-cash",
            expense_account_id="acc-software",
            status="PENDING",
        ),
        VoucherRecord(
            id="v-8",
            voucher_number="PV-00077",
            voucher_type=VoucherType.PAYMENT,
            voucher_to=VoucherTo.VENDOR,
            voucher_date=date(2023, 10, 21),
            description="Rent Payment - October 2023",
            amount=Decimal("2000.00"),
            cash_account_id="acc-cash",
            expense_account_id="acc-rent",
            status="APPROVED",
        ),
    ]
