"""
Emergency overrides.

An emergency stays active until deactivated by someone; there is no expiry.
affected_entries is written when the emergency is closed, since only then
is the full list of entries made under the override known.
"""
from __future__ import annotations

from typing import Optional

import structlog

from gatehouse.core.errors import EmergencyAlreadyDeactivatedError, EntityNotFoundError
from gatehouse.db.serialization import utcnow
from gatehouse.db.store import RecordStore
from gatehouse.models.emergency import EmergencyLog
from gatehouse.repositories.emergency_logs import EmergencyLogRepository
from gatehouse.schemas.enums import AuditAction, EntityType
from gatehouse.services.audit import AuditContext, record_audit

logger = structlog.get_logger()


async def activate_emergency(
    store: RecordStore,
    emergency_type: str,
    activated_by: str,
    override_reason: Optional[str] = None,
    notes: Optional[str] = None,
    context: Optional[AuditContext] = None,
) -> EmergencyLog:
    log = EmergencyLog(
        emergency_type=emergency_type,
        activated_by=activated_by,
        override_reason=override_reason,
        notes=notes,
    )
    async with store.transaction():
        await EmergencyLogRepository(store).insert(log)
        await record_audit(
            store, EntityType.EMERGENCY, log.id, AuditAction.OVERRIDE, activated_by,
            new_values=log.snapshot(), context=context,
        )

    logger.warning(
        "emergency_activated",
        emergency_id=log.id,
        emergency_type=emergency_type,
        activated_by=activated_by,
    )
    return log


async def deactivate_emergency(
    store: RecordStore,
    log_id: str,
    deactivated_by: str,
    affected_entries: Optional[list[str]] = None,
    context: Optional[AuditContext] = None,
) -> EmergencyLog:
    repo = EmergencyLogRepository(store)
    async with store.transaction():
        current = await repo.get(log_id)
        if current is None:
            raise EntityNotFoundError(EntityType.EMERGENCY.value, log_id)
        if not current.is_active:
            raise EmergencyAlreadyDeactivatedError(log_id)

        await repo.mark_deactivated(log_id, deactivated_by, utcnow(), affected_entries)
        closed = await repo.get(log_id)
        await record_audit(
            store, EntityType.EMERGENCY, log_id, AuditAction.UPDATE, deactivated_by,
            old_values=current.snapshot(), new_values=closed.snapshot(), context=context,
        )

    logger.warning(
        "emergency_deactivated",
        emergency_id=log_id,
        deactivated_by=deactivated_by,
        affected_entries=len(closed.affected_entries),
    )
    return closed


async def active_emergencies(store: RecordStore) -> list[EmergencyLog]:
    return await EmergencyLogRepository(store).list_active()
