"""
006: audit_logs

Strictly append-only history of every mutation on a tracked entity.

Revision ID: 006_create_audit_logs_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "006_create_audit_logs_table"


def upgrade() -> None:
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("entity_type", sa.Text, nullable=False),   # visitor | staff | delivery | emergency | ...
        sa.Column("entity_id", sa.Text, nullable=False),
        sa.Column("action", sa.Text, nullable=False),
        sa.Column("performed_by", sa.Text, nullable=False),
        sa.Column("old_values", sa.Text, nullable=True),     # JSON object
        sa.Column("new_values", sa.Text, nullable=True),     # JSON object
        sa.Column("ip_address", sa.Text, nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column("timestamp", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        sa.CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE', 'APPROVE', 'DENY', 'OVERRIDE')",
            name="ck_audit_logs_action",
        ),
        sa.CheckConstraint(
            "entity_type IN ('visitor', 'staff', 'delivery', 'emergency', 'risk_assessment', 'system')",
            name="ck_audit_logs_entity_type",
        ),
    )
