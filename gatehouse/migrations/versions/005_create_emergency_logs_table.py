"""
005: emergency_logs

Append-only; the deactivation columns are the only ones ever updated.

Revision ID: 005_create_emergency_logs_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "005_create_emergency_logs_table"


def upgrade() -> None:
    op.create_table(
        "emergency_logs",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("emergency_type", sa.Text, nullable=False),
        sa.Column("activated_by", sa.Text, nullable=False),
        sa.Column("activation_time", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("deactivation_time", sa.DateTime, nullable=True),
        sa.Column("deactivated_by", sa.Text, nullable=True),
        sa.Column("override_reason", sa.Text, nullable=True),
        sa.Column("affected_entries", sa.Text, nullable=True),  # JSON array of entry ids
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
