from __future__ import annotations

from gatehouse.models.delivery import DeliveryPersonnel
from gatehouse.repositories.base import Repository
from gatehouse.schemas.enums import DeliveryStatus


class DeliveryRepository(Repository[DeliveryPersonnel]):
    model = DeliveryPersonnel
    default_order = "expected_delivery_time ASC, created_at ASC"

    async def list_for_unit(self, recipient_unit: str) -> list[DeliveryPersonnel]:
        return await self._select(
            where="recipient_unit = :unit", params={"unit": recipient_unit}
        )

    async def list_by_status(self, status: DeliveryStatus) -> list[DeliveryPersonnel]:
        return await self._select(
            where="delivery_status = :status", params={"status": status.value}
        )
