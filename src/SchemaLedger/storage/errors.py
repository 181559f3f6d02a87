"""Error types raised by the migration engine.

Every failure surfaced by :func:`~SchemaLedger.storage.migration.run_migrations`
is a :class:`MigrationError`. The ``phase`` attribute tells callers which step
failed; the underlying driver error is always chained as ``__cause__``.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base class for migration failures."""

    phase = "migrate"


class MissingStoreError(MigrationError):
    """The bookkeeping table does not exist yet.

    Raised while reading the watermark and recovered by the engine, which
    creates the table and retries once.
    """

    phase = "watermark"

    def __init__(self, table: str) -> None:
        super().__init__(f"bookkeeping table {table!r} does not exist")
        self.table = table


class WatermarkReadError(MigrationError):
    phase = "watermark"

    def __init__(self, detail: object) -> None:
        super().__init__(f"failed to select max applied migration: {detail}")


class StoreInitializationError(MigrationError):
    phase = "initialize"

    def __init__(self, detail: object) -> None:
        super().__init__(f"failed to initialize schema migrations: {detail}")


class UnsupportedDriverError(MigrationError):
    """A driver error could not be classified.

    The error came from a database driver with no registered dialect, so a
    missing bookkeeping table cannot be told apart from any other failure.
    """

    phase = "classify"

    def __init__(self, detail: object) -> None:
        super().__init__(f"failed to parse error: unsupported driver ({detail})")


class MigrationApplyError(MigrationError):
    """A migration body, its record insert, or its commit failed."""

    phase = "apply"

    def __init__(self, version: int, detail: object) -> None:
        super().__init__(f"failed to apply migration {version}: {detail}")
        self.version = version
