"""
001: visitors

Revision ID: 001_create_visitors_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "001_create_visitors_table"


def upgrade() -> None:
    op.create_table(
        "visitors",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("phone_number", sa.Text, nullable=False),
        sa.Column("purpose", sa.Text, nullable=False),
        sa.Column("intended_resident", sa.Text, nullable=False),  # unit, e.g. A-101
        sa.Column("vehicle_number", sa.Text, nullable=True),

        sa.Column("entry_time", sa.DateTime, nullable=True),
        sa.Column("exit_time", sa.DateTime, nullable=True),

        # ── Approval ──
        sa.Column("approval_status", sa.Text, nullable=False, server_default="PENDING"),
        sa.Column("approved_by", sa.Text, nullable=True),
        sa.Column("approval_time", sa.DateTime, nullable=True),
        sa.Column("denial_reason", sa.Text, nullable=True),

        # ── Cached projection of the latest risk assessment ──
        sa.Column("risk_score", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("flagged", sa.Boolean, nullable=False, server_default=sa.text("0")),

        sa.Column("sync_status", sa.Text, nullable=False, server_default="LOCAL"),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        sa.CheckConstraint(
            "approval_status IN ('PENDING', 'APPROVED', 'DENIED')",
            name="ck_visitors_approval_status",
        ),
        sa.CheckConstraint(
            "sync_status IN ('LOCAL', 'SYNCED', 'CONFLICT')",
            name="ck_visitors_sync_status",
        ),
        sa.CheckConstraint("risk_score >= 0 AND risk_score <= 100", name="ck_visitors_risk_score"),
    )
