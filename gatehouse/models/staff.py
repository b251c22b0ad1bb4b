"""
Domestic staff profile.

Schedules are evaluated in the facility's configured timezone, never the
process timezone. Shifts whose end is earlier than their start run past
midnight into the next day.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from pydantic import Field, model_validator

from gatehouse.core.config import get_settings
from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity
from gatehouse.schemas.enums import ServiceType

ALL_UNITS = "ALL"

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# day → {"start": "HH:MM", "end": "HH:MM"}
WorkSchedule = dict[str, dict[str, str]]


def _parse_hhmm(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        return None


def _resolve_tz(tz: Union[ZoneInfo, str, None]) -> ZoneInfo:
    if isinstance(tz, ZoneInfo):
        return tz
    return ZoneInfo(tz or get_settings().facility_timezone)


class DomesticStaffProfile(Entity):
    TABLE = "domestic_staff"
    JSON_ARRAY_FIELDS = ("authorized_units",)
    JSON_OBJECT_FIELDS = ("work_schedule",)
    DATETIME_FIELDS = ("last_entry", "created_at", "updated_at")
    DATE_FIELDS = ("start_date", "end_date")
    BOOL_FIELDS = ("active",)

    name: str
    phone_number: str
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    service_type: ServiceType
    authorized_units: list[str] = []
    work_schedule: WorkSchedule = {}
    access_code: str
    biometric_id: Optional[str] = None
    start_date: date = Field(default_factory=lambda: utcnow().date())
    end_date: Optional[date] = None
    active: bool = True
    last_entry: Optional[datetime] = None

    @model_validator(mode="after")
    def _active_has_no_end_date(self) -> "DomesticStaffProfile":
        if self.active and self.end_date is not None:
            raise ValueError("end_date must be empty while the profile is active")
        return self

    # ── Authorization ──

    def is_authorized_for_unit(self, unit_number: str) -> bool:
        return ALL_UNITS in self.authorized_units or unit_number in self.authorized_units

    def add_authorized_unit(self, unit_number: str) -> None:
        if unit_number not in self.authorized_units:
            self.authorized_units.append(unit_number)
            self.touch()

    def remove_authorized_unit(self, unit_number: str) -> None:
        if unit_number in self.authorized_units:
            self.authorized_units.remove(unit_number)
            self.touch()

    # ── Schedule ──

    def shift_for(self, weekday: int) -> Optional[tuple[time, time]]:
        """(start, end) for weekday 0=Monday, or None if off / malformed."""
        day = DAY_NAMES[weekday]
        entry = self.work_schedule.get(day) or self.work_schedule.get(day[:3])
        if not isinstance(entry, dict):
            return None
        start, end = _parse_hhmm(entry.get("start")), _parse_hhmm(entry.get("end"))
        if start is None or end is None:
            return None
        return start, end

    def is_working_at(self, moment: datetime, tz: Union[ZoneInfo, str, None] = None) -> bool:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        local = moment.astimezone(_resolve_tz(tz))
        current = local.time().replace(second=0, microsecond=0)

        today = self.shift_for(local.weekday())
        if today is not None:
            start, end = today
            if start <= end and start <= current <= end:
                return True
            if start > end and current >= start:
                return True

        # tail of yesterday's overnight shift
        yesterday = self.shift_for((local - timedelta(days=1)).weekday())
        if yesterday is not None:
            start, end = yesterday
            if start > end and current <= end:
                return True
        return False

    def is_working_now(self, tz: Union[ZoneInfo, str, None] = None) -> bool:
        return self.is_working_at(utcnow(), tz)

    def update_schedule(self, schedule: WorkSchedule) -> None:
        self.work_schedule = schedule
        self.touch()

    # ── Lifecycle ──

    def record_entry(self, at: Optional[datetime] = None) -> None:
        self.last_entry = at or utcnow()
        self.touch()

    def deactivate(self, end_date: Optional[date] = None) -> None:
        self.active = False
        self.end_date = end_date or utcnow().date()
        self.touch()

    def reactivate(self) -> None:
        self.active = True
        self.end_date = None
        self.touch()
