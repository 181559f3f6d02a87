"""Command implementations for SchemaLedger CLI.

Encapsulates the logic of each command, separated from CLI parameter
handling and resource management.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from SchemaLedger.storage.bookkeeping import BookkeepingStore
from SchemaLedger.storage.dialects import resolve_dialect
from SchemaLedger.storage.migration import (
    Migration,
    MigrationReport,
    pending_versions,
    run_migrations,
)
from SchemaLedger.utils.log import log


@dataclass(slots=True)
class MigrateCommand:
    """Apply outstanding migrations and log a summary."""

    conn: Any
    migrations: Mapping[int, Migration]
    table: str

    def execute(self) -> MigrationReport:
        log.info("Loaded %d migration(s)", len(self.migrations))
        report = run_migrations(self.conn, self.migrations, table=self.table)
        if report.applied:
            log.info(
                "Applied %d migration(s): %s",
                len(report.applied),
                ", ".join(str(v) for v in report.applied),
            )
        elif report.watermark is None:
            log.info("Database is up to date (no migrations applied)")
        else:
            log.info("Database is up to date (version %d)", report.watermark)
        return report


@dataclass(slots=True)
class StatusCommand:
    """Report applied records and pending versions without writing anything."""

    conn: Any
    migrations: Mapping[int, Migration]
    table: str

    def execute(self) -> list[int]:
        dialect = resolve_dialect(self.conn)
        store = BookkeepingStore(self.conn, dialect, table=self.table)
        for record in store.applied():
            migration = self.migrations.get(record.version)
            description = migration.description if migration else "(no local migration file)"
            log.info("applied  v%d  %s  %s", record.version, record.created_at, description)

        pending = pending_versions(self.conn, self.migrations, dialect=dialect, table=self.table)
        for version in pending:
            log.info("pending  v%d  %s", version, self.migrations[version].description)
        log.info("%d pending migration(s)", len(pending))
        return pending
