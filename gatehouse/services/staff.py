"""
Domestic staff registration and gate checks.

record_staff_entry() is the gate-side call: it resolves an access code and
decides whether the holder may enter the given unit right now. Only an
allowed entry mutates anything (last_entry + its audit row); a refusal is
logged and returned, never raised.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import structlog

from gatehouse.core.config import get_settings
from gatehouse.db.serialization import utcnow
from gatehouse.db.store import RecordStore
from gatehouse.models.staff import DomesticStaffProfile
from gatehouse.repositories.staff import StaffRepository
from gatehouse.schemas.enums import AuditAction, EntityType
from gatehouse.services.audit import AuditContext, audited_insert, audited_update, record_audit

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# Gate check outcome
# ═══════════════════════════════════════════════════════════════
DENY_UNKNOWN_CODE = "unknown_access_code"
DENY_INACTIVE = "staff_inactive"
DENY_UNIT = "unit_not_authorized"
DENY_OFF_SHIFT = "outside_work_schedule"


@dataclass(frozen=True)
class AccessCheck:
    allowed: bool
    staff_id: Optional[str] = None
    reason: Optional[str] = None


async def register_staff(
    store: RecordStore,
    profile: DomesticStaffProfile,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> DomesticStaffProfile:
    return await audited_insert(
        store, StaffRepository(store), EntityType.STAFF, profile, performed_by, context
    )


async def record_staff_entry(
    store: RecordStore,
    access_code: str,
    unit_number: str,
    performed_by: str = "gate",
    at: Optional[datetime] = None,
    context: Optional[AuditContext] = None,
) -> AccessCheck:
    """
    The lookup, the checks and the last_entry write share one transaction,
    so a concurrent deactivation either lands before the check or after
    the entry is recorded.
    """
    moment = at or utcnow()
    repo = StaffRepository(store)

    async with store.transaction():
        profile = await repo.get_by_access_code(access_code)
        reason = _denial_reason(profile, unit_number, moment)
        if reason is None:
            before = profile.snapshot()
            profile.record_entry(moment)
            await repo.update(profile)
            await record_audit(
                store, EntityType.STAFF, profile.id, AuditAction.UPDATE, performed_by,
                old_values=before, new_values=profile.snapshot(), context=context,
            )

    staff_id = profile.id if profile else None
    if reason is not None:
        logger.warning("staff_entry_denied", staff_id=staff_id, unit=unit_number, reason=reason)
        return AccessCheck(allowed=False, staff_id=staff_id, reason=reason)

    logger.info("staff_entry_recorded", staff_id=staff_id, unit=unit_number)
    return AccessCheck(allowed=True, staff_id=staff_id)


def _denial_reason(
    profile: Optional[DomesticStaffProfile], unit_number: str, moment: datetime
) -> Optional[str]:
    if profile is None:
        return DENY_UNKNOWN_CODE
    if not profile.active:
        return DENY_INACTIVE
    if not profile.is_authorized_for_unit(unit_number):
        return DENY_UNIT
    if not profile.is_working_at(moment, get_settings().facility_timezone):
        return DENY_OFF_SHIFT
    return None


async def deactivate_staff(
    store: RecordStore,
    staff_id: str,
    performed_by: str,
    end_date: Optional[date] = None,
    context: Optional[AuditContext] = None,
) -> DomesticStaffProfile:
    return await audited_update(
        store, StaffRepository(store), EntityType.STAFF, staff_id,
        lambda p: p.deactivate(end_date),
        AuditAction.UPDATE, performed_by, context,
    )


async def reactivate_staff(
    store: RecordStore,
    staff_id: str,
    performed_by: str,
    context: Optional[AuditContext] = None,
) -> DomesticStaffProfile:
    return await audited_update(
        store, StaffRepository(store), EntityType.STAFF, staff_id,
        lambda p: p.reactivate(),
        AuditAction.UPDATE, performed_by, context,
    )
