"""
Bring the configured store's schema up to date.

Usage:
    python -m gatehouse.migrate [DATABASE_PATH]

Defaults to the DATABASE_PATH setting (env or .env).
"""
from __future__ import annotations

import asyncio
import time
from typing import Optional

import structlog

from gatehouse.core.logging import configure_logging
from gatehouse.db.migrator import applied_migrations
from gatehouse.db.store import RecordStore

logger = structlog.get_logger()


async def run_migrate(database_path: Optional[str] = None) -> dict:
    started = time.monotonic()
    store = RecordStore(database_path)
    try:
        await store.initialize()
        ledger = await applied_migrations(store)
    finally:
        await store.close()

    result = {
        "database_path": store.database_path,
        "applied": store.migrations_applied,
        "total": len(ledger),
        "latest": ledger[-1] if ledger else None,
        "elapsed_seconds": round(time.monotonic() - started, 2),
    }
    logger.info("migrate_complete", **result)
    return result


if __name__ == "__main__":
    import sys

    configure_logging()
    path = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        result = asyncio.run(run_migrate(path))
        print(f"✓ Schema up to date at {result['database_path']}: "
              f"{len(result['applied'])} applied now, {result['total']} total "
              f"(latest: {result['latest']}, {result['elapsed_seconds']}s)")
    except Exception as e:
        print(f"✗ Migration failed: {e}", file=sys.stderr)
        sys.exit(1)
