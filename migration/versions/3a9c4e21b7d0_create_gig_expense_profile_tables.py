"""create gig, expense and user profile tables

Revision ID: 3a9c4e21b7d0
Revises:
Create Date: 2026-03-02
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3a9c4e21b7d0"
down_revision = None
branch_labels = None
depends_on = None


_GIG_STATUS = sa.Enum("UPCOMING", "PENDING_PAYMENT", "COMPLETED", name="gigstatus")


def upgrade() -> None:
    op.create_table(
        "gigs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("event_name", sa.String(), nullable=False),
        sa.Column("client_name", sa.String(), nullable=True),
        sa.Column("gig_type", sa.String(), nullable=True),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("status", _GIG_STATUS, nullable=False),
        sa.Column("expected_pay", sa.String(), nullable=True),
        sa.Column("actual_pay", sa.String(), nullable=True),
        sa.Column("tips", sa.String(), nullable=True),
        sa.Column("parking_expense", sa.String(), nullable=True),
        sa.Column("other_expenses", sa.String(), nullable=True),
        sa.Column("total_received", sa.String(), nullable=True),
        sa.Column("reimbursed_parking", sa.String(), nullable=True),
        sa.Column("reimbursed_other", sa.String(), nullable=True),
        sa.Column("unreimbursed_parking", sa.String(), nullable=True),
        sa.Column("unreimbursed_other", sa.String(), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("tax_percentage", sa.Integer(), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("gig_address", sa.String(), nullable=True),
        sa.Column("starting_address", sa.String(), nullable=True),
        sa.Column("got_paid_date", sa.DateTime(), nullable=True),
    )
    op.create_index("idx_gigs_user_date", "gigs", ["user_id", "date"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("amount", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("business_purpose", sa.String(), nullable=True),
        sa.Column("merchant", sa.String(), nullable=True),
        sa.Column("reimbursed_amount", sa.String(), nullable=True),
        sa.Column("gig_id", sa.Integer(), sa.ForeignKey("gigs.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("idx_expenses_user_date", "expenses", ["user_id", "date"])

    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("default_tax_percentage", sa.Integer(), nullable=True),
        sa.Column("home_address", sa.String(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("user_profiles")
    op.drop_index("idx_expenses_user_date", table_name="expenses")
    op.drop_table("expenses")
    op.drop_index("idx_gigs_user_date", table_name="gigs")
    op.drop_table("gigs")
