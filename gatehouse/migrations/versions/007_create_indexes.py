"""
007: secondary indexes for every table created in 001-006

Revision ID: 007_create_indexes
Create Date: 2026-09-14
"""
from alembic import op

revision = "007_create_indexes"

INDEXES = [
    # ── visitors ──
    ("idx_visitors_phone", "visitors", ["phone_number"]),
    ("idx_visitors_resident", "visitors", ["intended_resident"]),
    ("idx_visitors_status", "visitors", ["approval_status"]),
    ("idx_visitors_entry_time", "visitors", ["entry_time"]),
    ("idx_visitors_risk_score", "visitors", ["risk_score"]),
    ("idx_visitors_created_at", "visitors", ["created_at"]),

    # ── domestic_staff ──
    ("idx_staff_phone", "domestic_staff", ["phone_number"]),
    ("idx_staff_service_type", "domestic_staff", ["service_type"]),
    ("idx_staff_active", "domestic_staff", ["active"]),

    # ── risk_assessments ──
    ("idx_risk_visitor_id", "risk_assessments", ["visitor_id"]),
    ("idx_risk_level", "risk_assessments", ["risk_level"]),
    ("idx_risk_score", "risk_assessments", ["risk_score"]),
    ("idx_risk_assessment_time", "risk_assessments", ["assessment_time"]),

    # ── delivery_personnel ──
    ("idx_delivery_phone", "delivery_personnel", ["phone_number"]),
    ("idx_delivery_company", "delivery_personnel", ["company_name"]),
    ("idx_delivery_recipient", "delivery_personnel", ["recipient_unit"]),
    ("idx_delivery_status", "delivery_personnel", ["delivery_status"]),
    ("idx_delivery_time", "delivery_personnel", ["expected_delivery_time"]),

    # ── emergency_logs ──
    ("idx_emergency_type", "emergency_logs", ["emergency_type"]),
    ("idx_emergency_activation", "emergency_logs", ["activation_time"]),
    ("idx_emergency_activated_by", "emergency_logs", ["activated_by"]),

    # ── audit_logs ──
    ("idx_audit_entity", "audit_logs", ["entity_type", "entity_id"]),
    ("idx_audit_action", "audit_logs", ["action"]),
    ("idx_audit_performed_by", "audit_logs", ["performed_by"]),
    ("idx_audit_timestamp", "audit_logs", ["timestamp"]),
]


def upgrade() -> None:
    for name, table, columns in INDEXES:
        op.create_index(name, table, columns)
