"""
Ordered schema migrations for the gatehouse store.

The order of MIGRATION_MODULES is the order of application. Later
revisions (indexes) assume the tables of earlier ones exist.
"""
from __future__ import annotations

import importlib

from gatehouse.db.migrator import Migration

MIGRATION_MODULES = [
    "001_create_visitors_table",
    "002_create_domestic_staff_table",
    "003_create_risk_assessments_table",
    "004_create_delivery_personnel_table",
    "005_create_emergency_logs_table",
    "006_create_audit_logs_table",
    "007_create_indexes",
]


def load_migrations() -> list[Migration]:
    migrations = []
    for module_name in MIGRATION_MODULES:
        module = importlib.import_module(f"{__name__}.versions.{module_name}")
        migrations.append(Migration(name=module.revision, upgrade=module.upgrade))
    return migrations


MIGRATIONS = load_migrations()
