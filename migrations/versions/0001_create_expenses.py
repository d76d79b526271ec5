"""create expenses and expense_splits

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "expenses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("trip_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column(
            "category",
            sa.Enum("food", "transport", "accommodation", "ticket", "shopping", "other", name="expensecategory"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payer_id", sa.String(64), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_expenses_trip_id", "expenses", ["trip_id"])

    op.create_table(
        "expense_splits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("expense_id", sa.String(36), sa.ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_expense_splits_id", "expense_splits", ["id"])
    op.create_index("ix_expense_splits_expense_id", "expense_splits", ["expense_id"])


def downgrade():
    op.drop_index("ix_expense_splits_expense_id", table_name="expense_splits")
    op.drop_index("ix_expense_splits_id", table_name="expense_splits")
    op.drop_table("expense_splits")
    op.drop_index("ix_expenses_trip_id", table_name="expenses")
    op.drop_table("expenses")
    sa.Enum(name="expensecategory").drop(op.get_bind(), checkfirst=True)
