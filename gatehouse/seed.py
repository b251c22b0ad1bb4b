"""
Load sample staff and visitors into the configured store.

Usage:
    python -m gatehouse.seed [DATABASE_PATH]

Rows use fixed ids (and staff access codes) and are written with
INSERT OR IGNORE, so running the seed again changes nothing.
"""
from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from gatehouse.core.logging import configure_logging
from gatehouse.db.store import RecordStore
from gatehouse.models.base import Entity
from gatehouse.models.staff import ALL_UNITS, DomesticStaffProfile
from gatehouse.models.visitor import Visitor
from gatehouse.schemas.enums import ServiceType

logger = structlog.get_logger()

WEEKDAYS_9_TO_5 = {
    day: {"start": "09:00", "end": "17:00"}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}
NIGHT_SHIFT = {
    day: {"start": "22:00", "end": "06:00"}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
}

SAMPLE_STAFF = [
    DomesticStaffProfile(
        id="seed-staff-0001",
        name="Lakshmi Devi",
        phone_number="+919800000001",
        service_type=ServiceType.MAID,
        authorized_units=["A-101", "A-102"],
        work_schedule=WEEKDAYS_9_TO_5,
        access_code="STAFF-1001",
    ),
    DomesticStaffProfile(
        id="seed-staff-0002",
        name="Ravi Kumar",
        phone_number="+919800000002",
        service_type=ServiceType.DRIVER,
        authorized_units=["B-204"],
        work_schedule=WEEKDAYS_9_TO_5,
        access_code="STAFF-1002",
    ),
    DomesticStaffProfile(
        id="seed-staff-0003",
        name="Suresh Patil",
        phone_number="+919800000003",
        service_type=ServiceType.SECURITY,
        authorized_units=[ALL_UNITS],
        work_schedule=NIGHT_SHIFT,
        access_code="STAFF-1003",
    ),
]

SAMPLE_VISITORS = [
    Visitor(
        id="seed-visitor-0001",
        name="Anita Sharma",
        phone_number="+919811111111",
        purpose="Family visit",
        intended_resident="A-101",
    ),
    Visitor(
        id="seed-visitor-0002",
        name="Courier Walk-in",
        phone_number="+919822222222",
        purpose="Document pickup",
        intended_resident="B-204",
        vehicle_number="MH12AB1234",
    ),
]


async def _insert_or_ignore(store: RecordStore, entity: Entity) -> int:
    row = entity.to_row()
    columns = ", ".join(row)
    placeholders = ", ".join(f":{c}" for c in row)
    return await store.execute(
        f"INSERT OR IGNORE INTO {entity.TABLE} ({columns}) VALUES ({placeholders})", row
    )


async def run_seed(database_path: Optional[str] = None) -> dict:
    store = RecordStore(database_path)
    try:
        await store.initialize()
        async with store.transaction():
            staff = sum([await _insert_or_ignore(store, s) for s in SAMPLE_STAFF])
            visitors = sum([await _insert_or_ignore(store, v) for v in SAMPLE_VISITORS])
    finally:
        await store.close()

    result = {"staff_inserted": staff, "visitors_inserted": visitors}
    logger.info("seed_complete", database_path=store.database_path, **result)
    return result


if __name__ == "__main__":
    import sys

    configure_logging()
    path = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        result = asyncio.run(run_seed(path))
        print(f"✓ Seed loaded: {result['staff_inserted']} staff, "
              f"{result['visitors_inserted']} visitors inserted")
    except Exception as e:
        print(f"✗ Seed failed: {e}", file=sys.stderr)
        sys.exit(1)
