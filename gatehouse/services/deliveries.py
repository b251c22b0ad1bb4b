"""
Delivery registration, time-boxed access codes and status updates.
"""
from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Optional

from gatehouse.core.config import get_settings
from gatehouse.db.store import RecordStore
from gatehouse.models.delivery import DeliveryPersonnel
from gatehouse.repositories.deliveries import DeliveryRepository
from gatehouse.schemas.enums import AuditAction, DeliveryStatus, EntityType
from gatehouse.services.audit import AuditContext, audited_insert, audited_update

ACCESS_CODE_DIGITS = 6


def generate_access_code(digits: int = ACCESS_CODE_DIGITS) -> str:
    return f"{secrets.randbelow(10 ** digits):0{digits}d}"


async def register_delivery(
    store: RecordStore,
    delivery: DeliveryPersonnel,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> DeliveryPersonnel:
    return await audited_insert(
        store, DeliveryRepository(store), EntityType.DELIVERY, delivery, performed_by, context
    )


async def grant_delivery_access(
    store: RecordStore,
    delivery_id: str,
    performed_by: str,
    ttl: Optional[timedelta] = None,
    access_code: Optional[str] = None,
    context: Optional[AuditContext] = None,
) -> DeliveryPersonnel:
    ttl = ttl or timedelta(minutes=get_settings().delivery_access_ttl_minutes)
    code = access_code or generate_access_code()
    return await audited_update(
        store, DeliveryRepository(store), EntityType.DELIVERY, delivery_id,
        lambda d: d.grant_access(code, ttl),
        AuditAction.UPDATE, performed_by, context,
    )


async def update_delivery_status(
    store: RecordStore,
    delivery_id: str,
    status: DeliveryStatus,
    performed_by: str,
    note: Optional[str] = None,
    context: Optional[AuditContext] = None,
) -> DeliveryPersonnel:
    return await audited_update(
        store, DeliveryRepository(store), EntityType.DELIVERY, delivery_id,
        lambda d: d.transition(status, note),
        AuditAction.UPDATE, performed_by, context,
    )
