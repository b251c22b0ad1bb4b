from __future__ import annotations

from typing import Optional

from gatehouse.db.serialization import serialize_bool
from gatehouse.models.staff import ALL_UNITS, DomesticStaffProfile
from gatehouse.repositories.base import Repository
from gatehouse.schemas.filters import StaffFilters


class StaffRepository(Repository[DomesticStaffProfile]):
    model = DomesticStaffProfile
    default_order = "name ASC"

    async def get_by_access_code(self, access_code: str) -> Optional[DomesticStaffProfile]:
        row = await self.store.query_one(
            "SELECT * FROM domestic_staff WHERE access_code = :code", {"code": access_code}
        )
        return DomesticStaffProfile.from_row(row) if row is not None else None

    async def find(self, filters: StaffFilters) -> list[DomesticStaffProfile]:
        clauses: list[str] = []
        params: dict = {}

        if filters.name:
            clauses.append("LOWER(name) LIKE :name")
            params["name"] = f"%{filters.name.lower()}%"
        if filters.service_type is not None:
            clauses.append("service_type = :service_type")
            params["service_type"] = filters.service_type.value
        if filters.active is not None:
            clauses.append("active = :active")
            params["active"] = serialize_bool(filters.active)
        if filters.authorized_unit:
            # CASE keeps json_each away from rows holding malformed JSON
            clauses.append(
                """
                CASE WHEN json_valid(authorized_units) THEN EXISTS (
                    SELECT 1 FROM json_each(domestic_staff.authorized_units)
                     WHERE json_each.value IN (:unit, :all_units)
                ) ELSE 0 END
                """
            )
            params["unit"] = filters.authorized_unit
            params["all_units"] = ALL_UNITS

        return await self._select(
            where=" AND ".join(clauses),
            params=params,
            limit=filters.limit,
            offset=filters.offset,
        )
