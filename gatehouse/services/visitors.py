"""
Visitor lifecycle operations. Each call is one transaction including its
audit row.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from gatehouse.db.store import RecordStore
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.visitors import VisitorRepository
from gatehouse.schemas.enums import AuditAction, EntityType
from gatehouse.services.audit import AuditContext, audited_delete, audited_insert, audited_update


async def register_visitor(
    store: RecordStore,
    visitor: Visitor,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_insert(
        store, VisitorRepository(store), EntityType.VISITOR, visitor, performed_by, context
    )


async def approve_visitor(
    store: RecordStore,
    visitor_id: str,
    approved_by: str,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_update(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id,
        lambda v: v.approve(approved_by),
        AuditAction.APPROVE, approved_by, context,
    )


async def deny_visitor(
    store: RecordStore,
    visitor_id: str,
    reason: str,
    denied_by: str,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_update(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id,
        lambda v: v.deny(reason),
        AuditAction.DENY, denied_by, context,
    )


async def reset_visitor_approval(
    store: RecordStore,
    visitor_id: str,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_update(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id,
        lambda v: v.reset_approval(),
        AuditAction.UPDATE, performed_by, context,
    )


async def record_visitor_entry(
    store: RecordStore,
    visitor_id: str,
    performed_by: str,
    at: Optional[datetime] = None,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_update(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id,
        lambda v: v.mark_entry(at),
        AuditAction.UPDATE, performed_by, context,
    )


async def record_visitor_exit(
    store: RecordStore,
    visitor_id: str,
    performed_by: str,
    at: Optional[datetime] = None,
    context: Optional[AuditContext] = None,
) -> Visitor:
    return await audited_update(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id,
        lambda v: v.mark_exit(at),
        AuditAction.UPDATE, performed_by, context,
    )


async def delete_visitor(
    store: RecordStore,
    visitor_id: str,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> Visitor:
    """Deletes the visitor and, through the foreign key, all of its assessments."""
    return await audited_delete(
        store, VisitorRepository(store), EntityType.VISITOR, visitor_id, performed_by, context
    )
