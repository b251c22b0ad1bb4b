"""
003: risk_assessments

One row per assessment; rows are never updated. Deleting a visitor
deletes its assessments (ON DELETE CASCADE, foreign keys are enabled on
every connection by the store).

Revision ID: 003_create_risk_assessments_table
Create Date: 2026-09-14
"""
from alembic import op
import sqlalchemy as sa

revision = "003_create_risk_assessments_table"


def upgrade() -> None:
    op.create_table(
        "risk_assessments",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column(
            "visitor_id",
            sa.Text,
            sa.ForeignKey("visitors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assessment_time", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        # ── Composite ──
        sa.Column("risk_score", sa.Float, nullable=False),
        sa.Column("risk_level", sa.Text, nullable=False),

        # ── Factor breakdown (0-100 each) ──
        sa.Column("frequency_score", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("timing_score", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("behavior_score", sa.Float, nullable=False, server_default=sa.text("0")),
        sa.Column("historical_score", sa.Float, nullable=False, server_default=sa.text("0")),

        # ── Explanation (JSON text) ──
        sa.Column("anomalies", sa.Text, nullable=True),
        sa.Column("explanation", sa.Text, nullable=True),
        sa.Column("confidence", sa.Float, nullable=False, server_default=sa.text("0")),

        sa.Column("created_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("CURRENT_TIMESTAMP")),

        sa.CheckConstraint(
            "risk_level IN ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')",
            name="ck_risk_assessments_risk_level",
        ),
    )
