from __future__ import annotations

from datetime import datetime
from typing import Optional

from gatehouse.db.serialization import serialize_array, serialize_datetime
from gatehouse.models.emergency import EmergencyLog
from gatehouse.repositories.base import AppendOnlyRepository


class EmergencyLogRepository(AppendOnlyRepository[EmergencyLog]):
    """Rows are never deleted; deactivation is the only update."""
    model = EmergencyLog
    default_order = "activation_time DESC"

    async def list_active(self) -> list[EmergencyLog]:
        return await self._select(where="deactivation_time IS NULL")

    async def mark_deactivated(
        self,
        log_id: str,
        deactivated_by: str,
        deactivation_time: datetime,
        affected_entries: Optional[list[str]] = None,
    ) -> int:
        """Returns 0 when the log is missing or was already deactivated."""
        return await self.store.execute(
            """
            UPDATE emergency_logs
               SET deactivation_time = :deactivation_time,
                   deactivated_by = :deactivated_by,
                   affected_entries = COALESCE(:affected_entries, affected_entries),
                   updated_at = :deactivation_time
             WHERE id = :id
               AND deactivation_time IS NULL
            """,
            {
                "id": log_id,
                "deactivated_by": deactivated_by,
                "deactivation_time": serialize_datetime(deactivation_time),
                "affected_entries": (
                    serialize_array(affected_entries) if affected_entries is not None else None
                ),
            },
        )
