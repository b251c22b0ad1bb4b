"""
Record store: the single owner of every persisted row.

One RecordStore is constructed per process and handed to whoever needs it;
there is no module-level instance. The store holds ONE writer connection:

  * writes are serialized through it (an asyncio.Lock guards the connection
    for the duration of each statement or explicit transaction),
  * reads outside a transaction against a file store use a separate pooled
    connection, so WAL readers never wait on the writer,
  * reads inside a transaction use the writer and see its own changes.

Transactions are explicit and non-nested. Outside begin()/commit() each
execute() is its own atomic unit. Inside, a failed statement leaves the
transaction open: the caller must rollback() before further work.

SQLite notes:
  pysqlite's implicit BEGIN handling does not cover DDL, which would let a
  half-applied migration survive a rollback. The driver's transaction
  handling is switched off on connect and BEGIN is emitted from the
  SQLAlchemy "begin" event instead.
"""
from __future__ import annotations

import asyncio
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Sequence

import structlog
from sqlalchemy import event, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from gatehouse.core.config import get_settings
from gatehouse.core.errors import StoreNotInitializedError, TransactionStateError
from gatehouse.db.migrator import Migration, run_migrations

logger = structlog.get_logger()

MEMORY = ":memory:"

Params = Optional[Mapping[str, Any]]


class RecordStore:

    def __init__(
        self,
        database_path: Optional[str] = None,
        migrations: Optional[Sequence[Migration]] = None,
        busy_timeout_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.database_path = database_path or settings.database_path
        self._migrations = migrations
        self._busy_timeout = (
            busy_timeout_seconds if busy_timeout_seconds is not None
            else settings.sqlite_busy_timeout_seconds
        )

        self._engine: Optional[AsyncEngine] = None
        self._conn: Optional[AsyncConnection] = None
        self._write_lock: Optional[asyncio.Lock] = None
        self._tx_owner: Optional[asyncio.Task] = None
        self._ready = False
        self.migrations_applied: list[str] = []

    # ── State ──

    @property
    def is_memory(self) -> bool:
        return self.database_path == MEMORY

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def in_transaction(self) -> bool:
        return self._tx_owner is not None

    def _require_connection(self) -> AsyncConnection:
        if self._conn is None:
            raise StoreNotInitializedError()
        return self._conn

    def _owns_transaction(self) -> bool:
        return self._tx_owner is not None and self._tx_owner is asyncio.current_task()

    # ═══════════════════════════════════════════════════════════════
    # Lifecycle
    # ═══════════════════════════════════════════════════════════════

    async def initialize(self) -> None:
        """
        Open the store and bring its schema up to date:
          1. create the parent directory (file stores)
          2. open the writer connection (foreign keys on, WAL for files)
          3. run pending migrations
        Any failure closes the connection again and propagates.
        """
        if self._conn is not None:
            return

        if not self.is_memory:
            directory = os.path.dirname(os.path.abspath(self.database_path))
            os.makedirs(directory, exist_ok=True)

        self._engine = self._create_engine()
        self._write_lock = asyncio.Lock()
        try:
            self._conn = await self._engine.connect()
            logger.info("store_connected", database_path=self.database_path)

            migrations = self._migrations
            if migrations is None:
                from gatehouse.migrations import MIGRATIONS
                migrations = MIGRATIONS
            self.migrations_applied = await run_migrations(self, migrations)
        except Exception as e:
            logger.error("store_initialization_failed", database_path=self.database_path, error=str(e))
            await self.close()
            raise

        self._ready = True
        logger.info("store_initialized", database_path=self.database_path)

    async def close(self) -> None:
        """Safe to call when never initialized, and more than once."""
        conn, engine = self._conn, self._engine
        self._conn = None
        self._engine = None
        self._ready = False
        self._end_transaction()

        if conn is not None:
            await conn.close()
        if engine is not None:
            await engine.dispose()
            logger.info("store_closed", database_path=self.database_path)

    def _create_engine(self) -> AsyncEngine:
        url = URL.create("sqlite+aiosqlite", database=self.database_path)
        kwargs: dict[str, Any] = {"connect_args": {"timeout": self._busy_timeout}}
        if self.is_memory:
            # every connection to :memory: is a new database; share one
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(url, **kwargs)

        use_wal = not self.is_memory

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            if use_wal:
                cursor.execute("PRAGMA journal_mode = WAL")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine

    # ═══════════════════════════════════════════════════════════════
    # Transactions
    # ═══════════════════════════════════════════════════════════════

    async def begin(self) -> None:
        conn = self._require_connection()
        if self._owns_transaction():
            raise TransactionStateError("A transaction is already open on this connection")

        await self._write_lock.acquire()
        try:
            await conn.begin()
        except BaseException:
            self._write_lock.release()
            raise
        self._tx_owner = asyncio.current_task()

    async def commit(self) -> None:
        conn = self._require_connection()
        if not self._owns_transaction():
            raise TransactionStateError("No transaction is open")
        # a failed COMMIT leaves the transaction open for rollback()
        await conn.commit()
        self._end_transaction()

    async def rollback(self) -> None:
        conn = self._require_connection()
        if not self._owns_transaction():
            raise TransactionStateError("No transaction is open")
        try:
            await conn.rollback()
        finally:
            self._end_transaction()

    def _end_transaction(self) -> None:
        if self._tx_owner is None:
            return
        self._tx_owner = None
        if self._write_lock is not None and self._write_lock.locked():
            self._write_lock.release()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["RecordStore"]:
        """
        Opt-in helper: begin, yield, commit; rollback and re-raise on error.
        The store never wraps statements in a transaction on its own.
        """
        await self.begin()
        try:
            yield self
            await self.commit()
        except BaseException:
            if self._owns_transaction():
                await self.rollback()
            raise

    # ═══════════════════════════════════════════════════════════════
    # Statements
    # ═══════════════════════════════════════════════════════════════

    async def execute(self, sql: str, params: Params = None) -> int:
        """Run a parameterized statement; returns the affected row count."""
        conn = self._require_connection()
        if self._owns_transaction():
            result = await conn.execute(text(sql), dict(params or {}))
            return result.rowcount

        async with self._write_lock:
            try:
                result = await conn.execute(text(sql), dict(params or {}))
                rowcount = result.rowcount
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise
        return rowcount

    async def query_one(self, sql: str, params: Params = None) -> Optional[dict[str, Any]]:
        async with self._reader() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def query_many(self, sql: str, params: Params = None) -> list[dict[str, Any]]:
        async with self._reader() as conn:
            result = await conn.execute(text(sql), dict(params or {}))
            rows = result.mappings().all()
        return [dict(r) for r in rows]

    async def run_sync(self, fn: Callable[..., Any], *args: Any) -> Any:
        """
        Run fn(sync_connection, *args) on the writer inside the caller's
        open transaction. Used by the migrator to drive Alembic operations.
        """
        conn = self._require_connection()
        if not self._owns_transaction():
            raise TransactionStateError("run_sync requires an open transaction")
        return await conn.run_sync(fn, *args)

    @asynccontextmanager
    async def _reader(self) -> AsyncIterator[AsyncConnection]:
        conn = self._require_connection()
        if self._owns_transaction():
            yield conn
            return

        if self.is_memory:
            async with self._write_lock:
                try:
                    yield conn
                finally:
                    await conn.rollback()
            return

        async with self._engine.connect() as reader:
            yield reader
