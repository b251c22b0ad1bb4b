"""
002: domestic_staff

authorized_units and work_schedule are JSON text (see db.serialization).

Revision ID: 002_create_domestic_staff_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "002_create_domestic_staff_table"


def upgrade() -> None:
    op.create_table(
        "domestic_staff",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("phone_number", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("emergency_contact", sa.Text, nullable=True),
        sa.Column("service_type", sa.Text, nullable=False),
        sa.Column("authorized_units", sa.Text, nullable=True),   # ["A-101", ...] or ["ALL"]
        sa.Column("work_schedule", sa.Text, nullable=True),      # {"monday": {"start": ..., "end": ...}}
        sa.Column("access_code", sa.Text, nullable=False, unique=True),
        sa.Column("biometric_id", sa.Text, nullable=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.text("1")),
        sa.Column("last_entry", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        sa.CheckConstraint(
            "service_type IN ('MAID', 'COOK', 'DRIVER', 'GARDENER', 'SECURITY', 'OTHER')",
            name="ck_domestic_staff_service_type",
        ),
        sa.CheckConstraint(
            "NOT (active = 1 AND end_date IS NOT NULL)",
            name="ck_domestic_staff_active_end_date",
        ),
    )
