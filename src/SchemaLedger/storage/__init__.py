"""Storage layer for SchemaLedger.

Provides the migration engine, the bookkeeping store it writes to, and the
connection and transaction helpers they share.
"""

from __future__ import annotations

from SchemaLedger.storage.bookkeeping import DEFAULT_TABLE, AppliedMigration, BookkeepingStore
from SchemaLedger.storage.db import DatabaseManager, connect, ensure_db
from SchemaLedger.storage.dialects import ErrorKind, classify_error, resolve_dialect
from SchemaLedger.storage.errors import (
    MigrationApplyError,
    MigrationError,
    MissingStoreError,
    StoreInitializationError,
    UnsupportedDriverError,
    WatermarkReadError,
)
from SchemaLedger.storage.loader import load_migrations, load_migrations_from_package
from SchemaLedger.storage.migration import (
    Migration,
    MigrationReport,
    pending_versions,
    run_migrations,
)
from SchemaLedger.storage.transaction import Transaction, transaction

__all__ = [
    "DEFAULT_TABLE",
    "AppliedMigration",
    "BookkeepingStore",
    "DatabaseManager",
    "connect",
    "ensure_db",
    "ErrorKind",
    "classify_error",
    "resolve_dialect",
    "MigrationError",
    "MissingStoreError",
    "WatermarkReadError",
    "StoreInitializationError",
    "UnsupportedDriverError",
    "MigrationApplyError",
    "load_migrations",
    "load_migrations_from_package",
    "Migration",
    "MigrationReport",
    "pending_versions",
    "run_migrations",
    "Transaction",
    "transaction",
]
