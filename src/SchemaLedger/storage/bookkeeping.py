"""Bookkeeping store: the table of applied migrations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from SchemaLedger.storage.dialects import Dialect, ErrorKind, classify_error
from SchemaLedger.storage.errors import MissingStoreError, WatermarkReadError
from SchemaLedger.storage.transaction import Transaction, transaction
from SchemaLedger.utils.log import log

DEFAULT_TABLE = "schema_migrations"
TABLE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True, slots=True)
class AppliedMigration:
    """One row of the bookkeeping table."""

    version: int
    created_at: str


def format_timestamp(moment: datetime | None = None) -> str:
    """Render a record timestamp as ISO-8601 UTC with seconds precision."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="seconds")


class BookkeepingStore:
    """Persistent record of applied migrations.

    A row exists for version V exactly when migration V has been committed:
    :meth:`record` is only ever called on the transaction that ran the
    migration body.
    """

    def __init__(self, conn: Any, dialect: Dialect, table: str = DEFAULT_TABLE) -> None:
        """Initialize the store.

        Args:
            conn: Open DB-API connection.
            dialect: Dialect of ``conn``.
            table: Bookkeeping table name.
        """
        if not TABLE_NAME_RE.fullmatch(table):
            raise ValueError(f"invalid bookkeeping table name: {table!r}")
        self.conn = conn
        self.dialect = dialect
        self.table = table

    def initialize(self) -> None:
        """Create the bookkeeping table.

        There is no ``IF NOT EXISTS``: a table created concurrently by another
        process makes this fail like any other statement.
        """
        with transaction(self.conn, self.dialect) as tx:
            tx.execute(
                f"CREATE TABLE {self.table} ("
                " version INTEGER PRIMARY KEY,"
                " created_at TEXT NOT NULL"
                ")"
            )
        log.info("created bookkeeping table %s", self.table)

    def read_watermark(self) -> int | None:
        """Return the highest recorded version, or None if nothing is recorded.

        Raises:
            MissingStoreError: If the bookkeeping table does not exist.
            WatermarkReadError: If the query fails for any other reason.
            UnsupportedDriverError: If the driver error cannot be classified.
        """
        try:
            with transaction(self.conn, self.dialect) as tx:
                row = tx.execute(
                    f"SELECT COALESCE(MAX(version), -1) FROM {self.table}"
                ).fetchone()
        except Exception as err:  # noqa: BLE001 - driver errors have no common base
            if classify_error(err, self.table) is ErrorKind.MISSING_STORE:
                raise MissingStoreError(self.table) from err
            raise WatermarkReadError(err) from err

        if row is None or row[0] is None or row[0] < 0:
            return None
        return int(row[0])

    def record(self, tx: Transaction, version: int, applied_at: datetime | None = None) -> None:
        """Insert the record for ``version`` on the migration's own transaction."""
        marks = tx.placeholders(2)
        tx.execute(
            f"INSERT INTO {self.table} (version, created_at) VALUES ({marks[0]}, {marks[1]})",
            (version, format_timestamp(applied_at)),
        )

    def applied(self) -> list[AppliedMigration]:
        """List every recorded migration in version order.

        Returns an empty list while the bookkeeping table does not exist.
        """
        try:
            with transaction(self.conn, self.dialect) as tx:
                rows = tx.execute(
                    f"SELECT version, created_at FROM {self.table} ORDER BY version"
                ).fetchall()
        except Exception as err:  # noqa: BLE001 - driver errors have no common base
            if classify_error(err, self.table) is ErrorKind.MISSING_STORE:
                return []
            raise
        return [AppliedMigration(version=int(row[0]), created_at=str(row[1])) for row in rows]
