"""
004: delivery_personnel

Revision ID: 004_create_delivery_personnel_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "004_create_delivery_personnel_table"


def upgrade() -> None:
    op.create_table(
        "delivery_personnel",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("phone_number", sa.Text, nullable=False),
        sa.Column("company_name", sa.Text, nullable=False),
        sa.Column("delivery_type", sa.Text, nullable=False),
        sa.Column("recipient_unit", sa.Text, nullable=False),
        sa.Column("recipient_name", sa.Text, nullable=False),
        sa.Column("expected_delivery_time", sa.DateTime, nullable=True),
        sa.Column("actual_delivery_time", sa.DateTime, nullable=True),

        # ── Time-boxed gate access ──
        sa.Column("access_code", sa.Text, nullable=True),
        sa.Column("access_granted_at", sa.DateTime, nullable=True),
        sa.Column("access_expires_at", sa.DateTime, nullable=True),

        sa.Column("delivery_status", sa.Text, nullable=False, server_default="PENDING"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        sa.CheckConstraint(
            "delivery_status IN ('PENDING', 'IN_PROGRESS', 'COMPLETED', 'FAILED')",
            name="ck_delivery_personnel_status",
        ),
    )
