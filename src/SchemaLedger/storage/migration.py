"""Schema migration engine.

Applies numbered migrations to a database exactly once each, in ascending
version order. Progress is kept in a bookkeeping table (see
:mod:`SchemaLedger.storage.bookkeeping`), created on the first run that finds
it missing.

Each migration runs in its own transaction together with the insert of its
bookkeeping record, so a version is recorded if and only if its changes were
committed. The first failure aborts the run; migrations committed before it
stay applied, and the next run resumes at the failed version.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from SchemaLedger.storage.bookkeeping import DEFAULT_TABLE, BookkeepingStore
from SchemaLedger.storage.dialects import Dialect, resolve_dialect
from SchemaLedger.storage.errors import (
    MigrationApplyError,
    MissingStoreError,
    StoreInitializationError,
)
from SchemaLedger.storage.transaction import Transaction, transaction
from SchemaLedger.utils.log import log

MigrationBody = Callable[[Transaction], Any]

# One read, plus one retry after creating the bookkeeping table.
_MAX_WATERMARK_ATTEMPTS = 2


# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Migration:
    """A single versioned schema migration.

    Instances are migration bodies themselves: calling one with a transaction
    runs ``apply`` when given, otherwise every statement of ``sql``.

    Attributes:
        version: Positive integer; migrations run in ascending order.
        description: Human-readable summary of what this migration does.
        sql: One or more semicolon-separated DDL/DML statements.
        apply: Callable taking the transaction, used instead of ``sql``.
    """

    version: int
    description: str
    sql: str = ""
    apply: MigrationBody | None = field(default=None, compare=False)

    def __call__(self, tx: Transaction) -> None:
        if self.apply is not None:
            self.apply(tx)
            return
        # Statements run one by one; executescript() would commit implicitly.
        for stmt in split_statements(self.sql):
            tx.execute(stmt)


@dataclass(frozen=True, slots=True)
class MigrationReport:
    """Outcome of a successful :func:`run_migrations` call.

    Attributes:
        watermark: Highest version recorded before the run, None if none.
        applied: Versions applied by this run, ascending.
        initialized_store: Whether the bookkeeping table was created.
    """

    watermark: int | None
    applied: tuple[int, ...]
    initialized_store: bool = False


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def run_migrations(
    conn: Any,
    migrations: Mapping[int, MigrationBody],
    *,
    dialect: Dialect | None = None,
    table: str = DEFAULT_TABLE,
) -> MigrationReport:
    """Apply all outstanding migrations to the database.

    Steps performed on every call:
      1. Validate and sort the supplied versions ascending.
      2. Read the watermark (highest recorded version) in its own transaction.
         If the bookkeeping table is missing, create it and read again; this
         happens at most once per call.
      3. For each version above the watermark, in order, run the body and
         insert its record in one transaction, then commit.

    Args:
        conn: Open DB-API connection (sqlite3 or psycopg2).
        migrations: Mapping of version to migration body. Gaps are allowed.
        dialect: Override for the dialect derived from ``conn``.
        table: Bookkeeping table name.

    Returns:
        Report naming the watermark and the versions applied.

    Raises:
        ValueError: If a version is not a positive integer.
        WatermarkReadError: If the watermark query fails.
        StoreInitializationError: If the bookkeeping table cannot be created.
        MissingStoreError: If the table is still missing after creating it.
        UnsupportedDriverError: If the driver's errors cannot be classified.
        MigrationApplyError: If a migration fails; later ones are not run.
    """
    dialect = dialect or resolve_dialect(conn)
    store = BookkeepingStore(conn, dialect, table=table)
    initialized = False

    for attempt in range(1, _MAX_WATERMARK_ATTEMPTS + 1):
        versions = _sorted_versions(migrations)
        try:
            watermark = store.read_watermark()
        except MissingStoreError:
            if attempt == _MAX_WATERMARK_ATTEMPTS:
                raise
            log.info("bookkeeping table %s not found, creating it", table)
            try:
                store.initialize()
            except Exception as err:  # noqa: BLE001 - driver errors have no common base
                raise StoreInitializationError(err) from err
            initialized = True
            continue
        break

    pending = [v for v in versions if watermark is None or v > watermark]
    if not pending:
        log.debug("schema already at version %s, no migrations to run", watermark)
        return MigrationReport(watermark=watermark, applied=(), initialized_store=initialized)

    log.debug("watermark=%s, %d migration(s) pending", watermark, len(pending))
    applied: list[int] = []
    for version in pending:
        _apply_migration(store, version, migrations[version])
        applied.append(version)
        log.info("applied migration v%d", version)

    return MigrationReport(
        watermark=watermark,
        applied=tuple(applied),
        initialized_store=initialized,
    )


def pending_versions(
    conn: Any,
    migrations: Mapping[int, MigrationBody],
    *,
    dialect: Dialect | None = None,
    table: str = DEFAULT_TABLE,
) -> list[int]:
    """Return the versions a :func:`run_migrations` call would apply.

    Read-only: a missing bookkeeping table means every version is pending.
    """
    dialect = dialect or resolve_dialect(conn)
    store = BookkeepingStore(conn, dialect, table=table)
    versions = _sorted_versions(migrations)
    try:
        watermark = store.read_watermark()
    except MissingStoreError:
        return versions
    return [v for v in versions if watermark is None or v > watermark]


def split_statements(sql: str) -> list[str]:
    """Split a semicolon-separated script into non-empty statements."""
    return [s.strip() for s in sql.split(";") if s.strip()]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _sorted_versions(migrations: Mapping[int, MigrationBody]) -> list[int]:
    """Return migration versions ascending.

    Raises:
        ValueError: If a version is not a positive int or a body is not callable.
    """
    for version, body in migrations.items():
        if isinstance(version, bool) or not isinstance(version, int) or version < 1:
            raise ValueError(f"migration version must be a positive integer, got {version!r}")
        if not callable(body):
            raise ValueError(f"migration {version} is not callable")
    return sorted(migrations)


def _apply_migration(store: BookkeepingStore, version: int, body: MigrationBody) -> None:
    """Run one migration body and record it in a single transaction.

    Raises:
        MigrationApplyError: If the body, the record insert or the commit
            fails; the transaction is rolled back.
    """
    try:
        with transaction(store.conn, store.dialect) as tx:
            body(tx)
            store.record(tx, version)
    except Exception as err:  # noqa: BLE001 - bodies may raise anything
        raise MigrationApplyError(version, err) from err
