from __future__ import annotations

from typing import Optional

from gatehouse.models.risk_assessment import RiskAssessment
from gatehouse.repositories.base import AppendOnlyRepository


class RiskAssessmentRepository(AppendOnlyRepository[RiskAssessment]):
    """Assessments are never updated: a new evaluation is a new row."""
    model = RiskAssessment
    default_order = "assessment_time DESC"

    async def list_for_visitor(self, visitor_id: str, limit: Optional[int] = None) -> list[RiskAssessment]:
        return await self._select(
            where="visitor_id = :visitor_id",
            params={"visitor_id": visitor_id},
            order_by="assessment_time DESC, rowid DESC",
            limit=limit,
        )

    async def latest_for_visitor(self, visitor_id: str) -> Optional[RiskAssessment]:
        rows = await self.list_for_visitor(visitor_id, limit=1)
        return rows[0] if rows else None

    async def count_for_visitor(self, visitor_id: str) -> int:
        return await self.count("visitor_id = :visitor_id", {"visitor_id": visitor_id})

    async def delete(self, assessment_id: str) -> int:
        # removes the assessment only; the visitor row is untouched
        return await self.store.execute(
            "DELETE FROM risk_assessments WHERE id = :id", {"id": assessment_id}
        )
