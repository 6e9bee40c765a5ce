"""cash flow classification on ledger accounts

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 14:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

CASH_FLOW_ACTIVITIES = ("OPERATING", "INVESTING", "FINANCING")


def upgrade() -> None:
    with op.batch_alter_table("ledger_accounts") as batch_op:
        batch_op.add_column(
            sa.Column("is_cash", sa.Boolean(), nullable=False, server_default=sa.false())
        )
        batch_op.add_column(
            sa.Column(
                "cash_flow_activity",
                sa.Enum(*CASH_FLOW_ACTIVITIES, name="cash_flow_activity_enum"),
                nullable=True,
            )
        )


def downgrade() -> None:
    with op.batch_alter_table("ledger_accounts") as batch_op:
        batch_op.drop_column("cash_flow_activity")
        batch_op.drop_column("is_cash")
