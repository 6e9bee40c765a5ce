"""initial ledger schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

LEDGER_GROUPS = ("ASSET", "LIABILITY", "EQUITY", "INCOME", "REVENUE", "EXPENSE")
TRANSACTION_STATUSES = ("DRAFT", "PENDING", "POSTED", "REVERSED")


def upgrade() -> None:
    op.create_table(
        "ledger_accounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("ledger_group", sa.Enum(*LEDGER_GROUPS, name="ledger_group_enum"), nullable=False),
        sa.Column("parent_account_id", sa.String(length=36), nullable=True),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["parent_account_id"], ["ledger_accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "ledger_transaction_groups",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("group_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("reference", sa.String(length=60), nullable=True),
        sa.Column("status", sa.Enum(*TRANSACTION_STATUSES, name="group_status_enum"), nullable=False),
        sa.Column("reversal_of_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("posted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("reference"),
    )
    op.create_index(
        "ix_ledger_transaction_groups_group_date", "ledger_transaction_groups", ["group_date"]
    )

    op.create_table(
        "vouchers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("voucher_number", sa.String(length=30), nullable=False),
        sa.Column(
            "voucher_type",
            sa.Enum("PAYMENT", "RECEIPT", "DEPOSIT", name="voucher_type_enum"),
            nullable=False,
        ),
        sa.Column(
            "voucher_to",
            sa.Enum("CLIENT", "VENDOR", "STAFF", "OTHER", name="voucher_to_enum"),
            nullable=False,
        ),
        sa.Column("voucher_date", sa.Date(), nullable=False),
        sa.Column("beneficiary_name", sa.String(length=100), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("cash_account_id", sa.String(length=36), nullable=False),
        sa.Column("expense_account_id", sa.String(length=36), nullable=True),
        sa.Column("income_account_id", sa.String(length=36), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "POSTED", "CANCELLED", name="voucher_status_enum"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("posted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["cash_account_id"], ["ledger_accounts.id"]),
        sa.ForeignKeyConstraint(["expense_account_id"], ["ledger_accounts.id"]),
        sa.ForeignKeyConstraint(["income_account_id"], ["ledger_accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("voucher_number"),
    )
    op.create_index("ix_vouchers_voucher_date", "vouchers", ["voucher_date"])
    op.create_index("ix_vouchers_cash_account_id", "vouchers", ["cash_account_id"])

    op.create_table(
        "ledger_transactions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column(
            "transaction_state",
            sa.Enum("DEBIT", "CREDIT", name="transaction_state_enum"),
            nullable=False,
        ),
        sa.Column("ledger_account_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status", sa.Enum(*TRANSACTION_STATUSES, name="transaction_status_enum"), nullable=False
        ),
        sa.Column("group_id", sa.String(length=36), nullable=True),
        sa.Column("voucher_id", sa.String(length=36), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["ledger_account_id"], ["ledger_accounts.id"]),
        sa.ForeignKeyConstraint(["group_id"], ["ledger_transaction_groups.id"]),
        sa.ForeignKeyConstraint(["voucher_id"], ["vouchers.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_ledger_transactions_transaction_date", "ledger_transactions", ["transaction_date"]
    )
    op.create_index(
        "ix_ledger_transactions_ledger_account_id", "ledger_transactions", ["ledger_account_id"]
    )
    op.create_index("ix_ledger_transactions_group_id", "ledger_transactions", ["group_id"])
    op.create_index("ix_ledger_transactions_voucher_id", "ledger_transactions", ["voucher_id"])

    op.create_table(
        "open_items",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("item_type", sa.Enum("INVOICE", "BILL", name="open_item_type_enum"), nullable=False),
        sa.Column("document_number", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=True),
        sa.Column("entity_name", sa.String(length=100), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("amount_paid", sa.Numeric(19, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_open_items_item_type", "open_items", ["item_type"])
    op.create_index("ix_open_items_entity_id", "open_items", ["entity_id"])


def downgrade() -> None:
    op.drop_table("open_items")
    op.drop_table("ledger_transactions")
    op.drop_table("vouchers")
    op.drop_table("ledger_transaction_groups")
    op.drop_table("ledger_accounts")
    for enum_name in (
        "open_item_type_enum",
        "transaction_status_enum",
        "transaction_state_enum",
        "voucher_status_enum",
        "voucher_to_enum",
        "voucher_type_enum",
        "group_status_enum",
        "ledger_group_enum",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
