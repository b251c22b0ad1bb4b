"""
Delivery personnel and their time-boxed gate access.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from gatehouse.core.errors import InvalidTransitionError
from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity
from gatehouse.schemas.enums import DeliveryStatus

# status → statuses it may move to
TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.PENDING: frozenset({DeliveryStatus.IN_PROGRESS, DeliveryStatus.COMPLETED, DeliveryStatus.FAILED}),
    DeliveryStatus.IN_PROGRESS: frozenset({DeliveryStatus.COMPLETED, DeliveryStatus.FAILED}),
    DeliveryStatus.COMPLETED: frozenset(),
    DeliveryStatus.FAILED: frozenset(),
}


class DeliveryPersonnel(Entity):
    TABLE = "delivery_personnel"
    DATETIME_FIELDS = (
        "expected_delivery_time", "actual_delivery_time",
        "access_granted_at", "access_expires_at",
        "created_at", "updated_at",
    )

    name: str
    phone_number: str
    company_name: str
    delivery_type: str
    recipient_unit: str
    recipient_name: str
    expected_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    access_code: Optional[str] = None
    access_granted_at: Optional[datetime] = None
    access_expires_at: Optional[datetime] = None
    delivery_status: DeliveryStatus = DeliveryStatus.PENDING
    notes: Optional[str] = None

    def grant_access(self, access_code: str, ttl: timedelta, at: Optional[datetime] = None) -> None:
        granted = at or utcnow()
        self.access_code = access_code
        self.access_granted_at = granted
        self.access_expires_at = granted + ttl
        self.touch()

    def has_valid_access(self, at: Optional[datetime] = None) -> bool:
        if not self.access_code or self.access_granted_at is None or self.access_expires_at is None:
            return False
        moment = at or utcnow()
        return self.access_granted_at <= moment < self.access_expires_at

    def transition(self, status: DeliveryStatus, note: Optional[str] = None) -> None:
        if status not in TRANSITIONS[self.delivery_status]:
            raise InvalidTransitionError(
                f"Delivery {self.id} cannot move from {self.delivery_status.value} to {status.value}"
            )
        self.delivery_status = status
        if status == DeliveryStatus.COMPLETED:
            self.actual_delivery_time = utcnow()
        if note:
            self.notes = note
        self.touch()

    def start(self) -> None:
        self.transition(DeliveryStatus.IN_PROGRESS)

    def complete(self) -> None:
        self.transition(DeliveryStatus.COMPLETED)

    def fail(self, note: Optional[str] = None) -> None:
        self.transition(DeliveryStatus.FAILED, note)
