"""
Literal value sets shared by the models, the schema CHECK constraints and
the scoring engine. Values are stored as-is in the database.
"""
from __future__ import annotations

from enum import Enum


class ApprovalStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class SyncStatus(str, Enum):
    LOCAL = "LOCAL"
    SYNCED = "SYNCED"
    CONFLICT = "CONFLICT"


class ServiceType(str, Enum):
    MAID = "MAID"
    COOK = "COOK"
    DRIVER = "DRIVER"
    GARDENER = "GARDENER"
    SECURITY = "SECURITY"
    OTHER = "OTHER"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class DeliveryStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    DENY = "DENY"
    OVERRIDE = "OVERRIDE"


class EntityType(str, Enum):
    VISITOR = "visitor"
    STAFF = "staff"
    DELIVERY = "delivery"
    EMERGENCY = "emergency"
    RISK_ASSESSMENT = "risk_assessment"
    SYSTEM = "system"
