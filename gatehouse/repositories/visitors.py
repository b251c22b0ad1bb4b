from __future__ import annotations

from gatehouse.db.serialization import serialize_bool, serialize_datetime, utcnow
from gatehouse.models.visitor import Visitor
from gatehouse.repositories.base import Repository
from gatehouse.schemas.filters import VisitorFilters
from gatehouse.scoring.engine import is_flagged, level_bounds


class VisitorRepository(Repository[Visitor]):
    model = Visitor

    async def find(self, filters: VisitorFilters) -> list[Visitor]:
        clauses: list[str] = []
        params: dict = {}

        if filters.name:
            clauses.append("LOWER(name) LIKE :name")
            params["name"] = f"%{filters.name.lower()}%"
        if filters.phone_number:
            clauses.append("phone_number = :phone_number")
            params["phone_number"] = filters.phone_number
        if filters.intended_resident:
            clauses.append("intended_resident = :intended_resident")
            params["intended_resident"] = filters.intended_resident
        if filters.approval_status is not None:
            clauses.append("approval_status = :approval_status")
            params["approval_status"] = filters.approval_status.value
        if filters.date_from is not None:
            clauses.append("created_at >= :date_from")
            params["date_from"] = serialize_datetime(filters.date_from)
        if filters.date_to is not None:
            clauses.append("created_at <= :date_to")
            params["date_to"] = serialize_datetime(filters.date_to)
        if filters.flagged is not None:
            clauses.append("flagged = :flagged")
            params["flagged"] = serialize_bool(filters.flagged)
        if filters.risk_level is not None:
            lower, upper = level_bounds(filters.risk_level)
            clauses.append("risk_score >= :risk_lower")
            params["risk_lower"] = lower
            if upper is not None:
                clauses.append("risk_score < :risk_upper")
                params["risk_upper"] = upper

        return await self._select(
            where=" AND ".join(clauses),
            params=params,
            limit=filters.limit,
            offset=filters.offset,
        )

    async def update_risk_score(self, visitor_id: str, score: float) -> int:
        """Single UPDATE so risk_score and flagged can never disagree."""
        return await self.store.execute(
            """
            UPDATE visitors
               SET risk_score = :risk_score,
                   flagged = :flagged,
                   updated_at = :updated_at
             WHERE id = :id
            """,
            {
                "id": visitor_id,
                "risk_score": score,
                "flagged": serialize_bool(is_flagged(score)),
                "updated_at": serialize_datetime(utcnow()),
            },
        )

    async def list_flagged(self, limit: int = 100) -> list[Visitor]:
        return await self._select(where="flagged = 1", order_by="risk_score DESC", limit=limit)
