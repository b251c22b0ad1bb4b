"""
Tests for the migration runner: ledger, ordering, idempotence and
rollback of a failing migration.
"""
import pytest
import sqlalchemy as sa
from alembic import op
from sqlalchemy.exc import OperationalError

from gatehouse.db.migrator import Migration, applied_migrations, pending_migrations
from gatehouse.db.store import RecordStore
from gatehouse.migrations import MIGRATION_MODULES, MIGRATIONS

EXPECTED_TABLES = {
    "visitors", "domestic_staff", "risk_assessments",
    "delivery_personnel", "emergency_logs", "audit_logs", "migrations",
}


def _create_alpha() -> None:
    op.create_table("alpha", sa.Column("id", sa.Integer, primary_key=True))


def _create_beta_then_fail() -> None:
    op.create_table("beta", sa.Column("id", sa.Integer, primary_key=True))
    op.execute("THIS IS NOT SQL")


def _create_beta() -> None:
    op.create_table("beta", sa.Column("id", sa.Integer, primary_key=True))


ALPHA = Migration("001_alpha", _create_alpha)
BROKEN_BETA = Migration("002_beta", _create_beta_then_fail)
BETA = Migration("002_beta", _create_beta)


async def _tables(store: RecordStore) -> set[str]:
    rows = await store.query_many(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
    )
    return {r["name"] for r in rows}


async def _schema(store: RecordStore) -> list[tuple]:
    rows = await store.query_many(
        "SELECT type, name, sql FROM sqlite_master WHERE name NOT LIKE 'sqlite_%' ORDER BY name"
    )
    return [(r["type"], r["name"], r["sql"]) for r in rows]


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "gate.db")


class TestInitialMigration:

    @pytest.mark.asyncio
    async def test_all_tables_created(self, store):
        assert EXPECTED_TABLES <= await _tables(store)

    @pytest.mark.asyncio
    async def test_ledger_in_declared_order(self, store):
        assert await applied_migrations(store) == [m.name for m in MIGRATIONS]
        assert store.migrations_applied == [m.name for m in MIGRATIONS]
        assert len(MIGRATIONS) == len(MIGRATION_MODULES)

    @pytest.mark.asyncio
    async def test_ledger_has_timestamps(self, store):
        rows = await store.query_many("SELECT name, executed_at FROM migrations")
        assert all(r["executed_at"] for r in rows)

    @pytest.mark.asyncio
    async def test_indexes_created(self, store):
        row = await store.query_one(
            "SELECT COUNT(*) AS n FROM sqlite_master WHERE type = 'index' AND name LIKE 'idx_%'"
        )
        assert row["n"] > 0

    @pytest.mark.asyncio
    async def test_nothing_pending(self, store):
        assert await pending_migrations(store, MIGRATIONS) == []


class TestIdempotence:

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(self, db_path):
        first = RecordStore(db_path)
        await first.initialize()
        schema_before = await _schema(first)
        ledger_before = await first.query_many("SELECT * FROM migrations ORDER BY id")
        await first.close()

        second = RecordStore(db_path)
        await second.initialize()
        try:
            assert second.migrations_applied == []
            assert await _schema(second) == schema_before
            assert await second.query_many("SELECT * FROM migrations ORDER BY id") == ledger_before
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_new_migration_appended_later(self, db_path):
        first = RecordStore(db_path, migrations=[ALPHA])
        await first.initialize()
        await first.close()

        second = RecordStore(db_path, migrations=[ALPHA, BETA])
        await second.initialize()
        try:
            assert second.migrations_applied == ["002_beta"]
            assert await applied_migrations(second) == ["001_alpha", "002_beta"]
        finally:
            await second.close()


class TestFailedMigration:

    @pytest.mark.asyncio
    async def test_error_propagates_and_store_stays_closed(self, db_path):
        store = RecordStore(db_path, migrations=[ALPHA, BROKEN_BETA])
        with pytest.raises(OperationalError):
            await store.initialize()
        assert not store.is_ready
        await store.close()

    @pytest.mark.asyncio
    async def test_partial_ddl_rolled_back(self, db_path):
        store = RecordStore(db_path, migrations=[ALPHA, BROKEN_BETA])
        with pytest.raises(OperationalError):
            await store.initialize()

        inspect = RecordStore(db_path, migrations=[])
        await inspect.initialize()
        try:
            tables = await _tables(inspect)
            # alpha committed before the failure; beta's CREATE TABLE did not survive
            assert "alpha" in tables
            assert "beta" not in tables
            assert await applied_migrations(inspect) == ["001_alpha"]
        finally:
            await inspect.close()

    @pytest.mark.asyncio
    async def test_committed_migrations_not_reapplied(self, db_path):
        store = RecordStore(db_path, migrations=[ALPHA, BROKEN_BETA])
        with pytest.raises(OperationalError):
            await store.initialize()

        fixed = RecordStore(db_path, migrations=[ALPHA, BETA])
        await fixed.initialize()
        try:
            assert fixed.migrations_applied == ["002_beta"]
            assert {"alpha", "beta"} <= await _tables(fixed)
        finally:
            await fixed.close()
