"""
Audit log row. Written once, never changed.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field

from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity
from gatehouse.schemas.enums import AuditAction, EntityType


class AuditLog(Entity):
    model_config = ConfigDict(frozen=True)

    TABLE = "audit_logs"
    JSON_OBJECT_FIELDS = ("old_values", "new_values")
    DATETIME_FIELDS = ("timestamp", "created_at", "updated_at")

    entity_type: EntityType
    entity_id: str
    action: AuditAction
    performed_by: str
    old_values: Optional[dict[str, Any]] = None
    new_values: Optional[dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)
