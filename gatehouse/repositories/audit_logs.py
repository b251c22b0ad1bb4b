from __future__ import annotations

from gatehouse.models.audit import AuditLog
from gatehouse.repositories.base import AppendOnlyRepository
from gatehouse.schemas.enums import EntityType


class AuditLogRepository(AppendOnlyRepository[AuditLog]):
    """Strictly append-only: no update, no delete."""
    model = AuditLog
    default_order = "timestamp DESC, rowid DESC"

    async def append(self, entry: AuditLog) -> AuditLog:
        return await self.insert(entry)

    async def list_for_entity(self, entity_type: EntityType, entity_id: str) -> list[AuditLog]:
        return await self._select(
            where="entity_type = :entity_type AND entity_id = :entity_id",
            params={"entity_type": entity_type.value, "entity_id": entity_id},
            order_by="timestamp ASC, rowid ASC",
        )

    async def list_recent(self, limit: int = 50) -> list[AuditLog]:
        return await self._select(limit=limit)
