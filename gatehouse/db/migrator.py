"""
Schema migration runner.

Migrations are applied in the order the caller lists them; nothing is
inferred from names or dependencies. Each pending migration runs in its own
transaction together with its ledger row, so a failure leaves no trace of
that migration while everything committed before it stays in place.

Migration bodies are plain Alembic revision-style functions: they call
`op.create_table(...)`, `op.create_index(...)` etc. The runner installs the
`alembic.op` proxy around each call, bound to the store's writer connection.

Ledger: migrations(id, name UNIQUE, executed_at)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

import structlog
from alembic.migration import MigrationContext
from alembic.operations import Operations

from gatehouse.db.serialization import serialize_datetime, utcnow

if TYPE_CHECKING:
    from gatehouse.db.store import RecordStore

logger = structlog.get_logger()

LEDGER_TABLE = "migrations"

LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS migrations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    executed_at TEXT NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    name: str
    upgrade: Callable[[], None]


def _apply(sync_connection, migration: Migration) -> None:
    context = MigrationContext.configure(connection=sync_connection)
    with Operations.context(context):
        migration.upgrade()


async def applied_migrations(store: "RecordStore") -> list[str]:
    """Names recorded in the ledger, oldest first. Empty if there is no ledger yet."""
    exists = await store.query_one(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :name",
        {"name": LEDGER_TABLE},
    )
    if exists is None:
        return []
    rows = await store.query_many(f"SELECT name FROM {LEDGER_TABLE} ORDER BY id")
    return [r["name"] for r in rows]


async def pending_migrations(store: "RecordStore", migrations: Sequence[Migration]) -> list[str]:
    applied = set(await applied_migrations(store))
    return [m.name for m in migrations if m.name not in applied]


async def run_migrations(store: "RecordStore", migrations: Sequence[Migration]) -> list[str]:
    """
    Apply every migration whose name is absent from the ledger.
    Returns the names applied by this call (empty when already up to date).
    Errors propagate unchanged after the failing migration is rolled back.
    """
    await store.execute(LEDGER_DDL)
    applied = set(await applied_migrations(store))

    executed: list[str] = []
    for migration in migrations:
        if migration.name in applied:
            continue

        logger.info("migration_started", migration=migration.name)
        await store.begin()
        try:
            await store.run_sync(_apply, migration)
            await store.execute(
                f"INSERT INTO {LEDGER_TABLE} (name, executed_at) VALUES (:name, :executed_at)",
                {"name": migration.name, "executed_at": serialize_datetime(utcnow())},
            )
            await store.commit()
        except Exception as e:
            logger.error("migration_failed", migration=migration.name, error=str(e))
            await store.rollback()
            raise

        applied.add(migration.name)
        executed.append(migration.name)
        logger.info("migration_applied", migration=migration.name)

    logger.info("migrations_complete", applied=len(executed), total=len(migrations))
    return executed
