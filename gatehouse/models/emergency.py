"""
Emergency override log. Active until explicitly deactivated; no expiry.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity


class EmergencyLog(Entity):
    TABLE = "emergency_logs"
    JSON_ARRAY_FIELDS = ("affected_entries",)
    DATETIME_FIELDS = ("activation_time", "deactivation_time", "created_at", "updated_at")

    emergency_type: str
    activated_by: str
    activation_time: datetime = Field(default_factory=utcnow)
    deactivation_time: Optional[datetime] = None
    deactivated_by: Optional[str] = None
    override_reason: Optional[str] = None
    affected_entries: list[str] = []
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.deactivation_time is None
