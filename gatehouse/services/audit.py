"""
Audit recorder.

record_audit() appends one audit_logs row on the caller's connection and
never begins or commits: called inside the caller's transaction, the audit
row commits or rolls back together with the mutation it describes.

The audited_* helpers bundle the common "load → change → write → audit"
sequence into one transaction for the service modules.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

import structlog

from gatehouse.core.errors import EntityNotFoundError
from gatehouse.db.store import RecordStore
from gatehouse.models.audit import AuditLog
from gatehouse.models.base import Entity
from gatehouse.repositories.audit_logs import AuditLogRepository
from gatehouse.repositories.base import Repository
from gatehouse.schemas.enums import AuditAction, EntityType

logger = structlog.get_logger()

E = TypeVar("E", bound=Entity)


@dataclass(frozen=True)
class AuditContext:
    """Network / client metadata of the request that caused a mutation."""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


async def record_audit(
    store: RecordStore,
    entity_type: EntityType,
    entity_id: str,
    action: AuditAction,
    performed_by: str,
    old_values: Optional[dict[str, Any]] = None,
    new_values: Optional[dict[str, Any]] = None,
    context: Optional[AuditContext] = None,
) -> AuditLog:
    context = context or AuditContext()
    entry = AuditLog(
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        performed_by=performed_by,
        old_values=old_values,
        new_values=new_values,
        ip_address=context.ip_address,
        user_agent=context.user_agent,
    )
    await AuditLogRepository(store).append(entry)
    logger.debug(
        "audit_recorded",
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        performed_by=performed_by,
    )
    return entry


async def audited_insert(
    store: RecordStore,
    repo: Repository[E],
    entity_type: EntityType,
    entity: E,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> E:
    async with store.transaction():
        await repo.insert(entity)
        await record_audit(
            store, entity_type, entity.id, AuditAction.CREATE, performed_by,
            new_values=entity.snapshot(), context=context,
        )
    logger.info("entity_created", entity_type=entity_type.value, entity_id=entity.id)
    return entity


async def audited_update(
    store: RecordStore,
    repo: Repository[E],
    entity_type: EntityType,
    entity_id: str,
    change: Callable[[E], None],
    action: AuditAction,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> E:
    """
    Load the entity, apply `change` to it, write it back and audit the
    before/after snapshots. `change` may raise to abort; nothing is kept.
    """
    async with store.transaction():
        entity = await repo.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_type.value, entity_id)
        before = entity.snapshot()
        change(entity)
        await repo.update(entity)
        await record_audit(
            store, entity_type, entity_id, action, performed_by,
            old_values=before, new_values=entity.snapshot(), context=context,
        )
    logger.info(
        "entity_updated",
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
    )
    return entity


async def audited_delete(
    store: RecordStore,
    repo: Repository[E],
    entity_type: EntityType,
    entity_id: str,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> E:
    async with store.transaction():
        entity = await repo.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_type.value, entity_id)
        await repo.delete(entity_id)
        await record_audit(
            store, entity_type, entity_id, AuditAction.DELETE, performed_by,
            old_values=entity.snapshot(), context=context,
        )
    logger.info("entity_deleted", entity_type=entity_type.value, entity_id=entity_id)
    return entity
