"""Initial schema: occupants, periods, bills, attendance, payments, audit log.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def upgrade() -> None:
    # Create occupants table
    op.create_table(
        "occupants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("room", sa.String(length=50), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("check_in_date", sa.Date(), nullable=True),
        sa.Column("check_out_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_occupants_room", "room"),
        sa.Index("ix_occupants_is_active", "is_active"),
    )

    # Create billing_periods table
    op.create_table(
        "billing_periods",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_billing_periods_name", "name", unique=True),
        sa.Index("ix_billing_periods_is_current", "is_current"),
    )

    # Create bills table
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("billing_period_id", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("previous_reading", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("current_reading", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("rate_per_unit", sa.Numeric(precision=10, scale=4), nullable=False),
        sa.Column("total_consumption", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("total_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["billing_period_id"], ["billing_periods.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_bills_billing_period_id", "billing_period_id"),
    )

    # Create bill_shares table
    op.create_table(
        "bill_shares",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("bill_id", sa.Integer(), nullable=False),
        sa.Column("occupant_id", sa.Integer(), nullable=False),
        sa.Column("days_stayed", sa.Integer(), nullable=False),
        sa.Column("share_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["occupant_id"], ["occupants.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("bill_id", "occupant_id", name="uq_bill_share_bill_occupant"),
        sa.Index("ix_bill_shares_bill_id", "bill_id"),
        sa.Index("ix_bill_shares_occupant_id", "occupant_id"),
        sa.Index("idx_bill_share_occupant", "occupant_id", "bill_id"),
    )

    # Create attendance_records table
    op.create_table(
        "attendance_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("occupant_id", sa.Integer(), nullable=False),
        sa.Column("attendance_date", sa.Date(), nullable=False),
        sa.Column("is_present", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("note", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["occupant_id"], ["occupants.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("occupant_id", "attendance_date", name="uq_attendance_occupant_date"),
        sa.Index("ix_attendance_records_occupant_id", "occupant_id"),
        sa.Index("idx_attendance_occupant_date", "occupant_id", "attendance_date"),
    )

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("occupant_id", sa.Integer(), nullable=False),
        sa.Column("kind", sa.Enum("RENT", "ELECTRICITY", name="paymentkind"), nullable=False),
        sa.Column("month", sa.String(length=7), nullable=True),
        sa.Column("bill_share_id", sa.Integer(), nullable=True),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PAID", "PENDING", "OVERDUE", name="paymentstatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["occupant_id"], ["occupants.id"]),
        sa.ForeignKeyConstraint(["bill_share_id"], ["bill_shares.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payments_occupant_id", "occupant_id"),
        sa.Index("ix_payments_month", "month"),
        sa.Index("ix_payments_bill_share_id", "bill_share_id"),
        sa.Index("ix_payments_payment_date", "payment_date"),
        sa.Index("idx_payment_occupant_month", "occupant_id", "month"),
        sa.Index("idx_payment_occupant_date", "occupant_id", "payment_date"),
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("actor", sa.String(length=255), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("payments")
    op.drop_table("attendance_records")
    op.drop_table("bill_shares")
    op.drop_table("bills")
    op.drop_table("billing_periods")
    op.drop_table("occupants")
