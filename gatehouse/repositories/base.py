"""
Table repositories over the RecordStore.

Repositories build parameterized SQL and convert rows to models; they never
begin or commit. Callers that need several statements to succeed or fail
together wrap them in store.begin()/commit() themselves.

AppendOnlyRepository exposes insert + reads only. Repository adds update
and delete for the tables whose rows may change.
"""
from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from gatehouse.db.store import RecordStore
from gatehouse.models.base import Entity

E = TypeVar("E", bound=Entity)

# never rewritten by update()
IMMUTABLE_COLUMNS = ("id", "created_at")


class AppendOnlyRepository(Generic[E]):
    model: type[E]
    default_order = "created_at DESC"

    def __init__(self, store: RecordStore):
        self.store = store

    @property
    def table(self) -> str:
        return self.model.TABLE

    async def insert(self, entity: E) -> E:
        row = entity.to_row()
        columns = ", ".join(row)
        placeholders = ", ".join(f":{c}" for c in row)
        await self.store.execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})", row
        )
        return entity

    async def get(self, entity_id: str) -> Optional[E]:
        row = await self.store.query_one(
            f"SELECT * FROM {self.table} WHERE id = :id", {"id": entity_id}
        )
        return self.model.from_row(row) if row is not None else None

    async def list_all(self, limit: int = 100, offset: int = 0) -> list[E]:
        return await self._select(limit=limit, offset=offset)

    async def count(self, where: str = "", params: Optional[dict[str, Any]] = None) -> int:
        clause = f" WHERE {where}" if where else ""
        row = await self.store.query_one(f"SELECT COUNT(*) AS n FROM {self.table}{clause}", params)
        return int(row["n"]) if row else 0

    async def _select(
        self,
        where: str = "",
        params: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[E]:
        sql = f"SELECT * FROM {self.table}"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order_by or self.default_order}"
        params = dict(params or {})
        if limit is not None:
            sql += " LIMIT :_limit OFFSET :_offset"
            params.update({"_limit": limit, "_offset": offset})
        rows = await self.store.query_many(sql, params)
        return [self.model.from_row(r) for r in rows]


class Repository(AppendOnlyRepository[E]):

    async def update(self, entity: E) -> int:
        """Write every mutable column of `entity`; returns rows affected (0 or 1)."""
        row = entity.to_row()
        updates = {c: v for c, v in row.items() if c not in IMMUTABLE_COLUMNS}
        set_clause = ", ".join(f"{c} = :{c}" for c in updates)
        updates["id"] = entity.id
        return await self.store.execute(
            f"UPDATE {self.table} SET {set_clause} WHERE id = :id", updates
        )

    async def delete(self, entity_id: str) -> int:
        return await self.store.execute(
            f"DELETE FROM {self.table} WHERE id = :id", {"id": entity_id}
        )
