"""Backend capability probe.

Database drivers report a missing table in different shapes. This module
keeps that knowledge in one place so the migration engine only ever sees an
:class:`ErrorKind`. Supported drivers: the stdlib ``sqlite3`` module and
``psycopg2``.
"""

from __future__ import annotations

import sqlite3
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Final

from SchemaLedger.storage.errors import UnsupportedDriverError

# SQLSTATE for "undefined_table".
PG_UNDEFINED_TABLE: Final[str] = "42P01"


class ErrorKind(Enum):
    """Classification of a driver error raised while reading the watermark."""

    MISSING_STORE = "missing_store"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Dialect:
    """SQL details that differ between drivers.

    Attributes:
        name: Driver name (``sqlite``, ``postgres`` or the DB-API module name).
        paramstyle: DB-API paramstyle used for bound parameters.
        explicit_begin: Whether a transaction must be opened with ``BEGIN``.
            The stdlib sqlite3 driver does not open one before DDL, psycopg2
            opens one implicitly before the first statement.
    """

    name: str
    paramstyle: str
    explicit_begin: bool

    def placeholders(self, count: int) -> list[str]:
        """Return ``count`` positional parameter markers for this driver."""
        if self.paramstyle == "qmark":
            return ["?"] * count
        if self.paramstyle in ("format", "pyformat"):
            return ["%s"] * count
        if self.paramstyle == "numeric":
            return [f":{idx}" for idx in range(1, count + 1)]
        raise UnsupportedDriverError(f"{self.name} paramstyle {self.paramstyle!r}")


SQLITE: Final[Dialect] = Dialect(name="sqlite", paramstyle="qmark", explicit_begin=True)
POSTGRES: Final[Dialect] = Dialect(name="postgres", paramstyle="pyformat", explicit_begin=False)


@dataclass(frozen=True, slots=True)
class _ErrorClassifier:
    name: str
    owns: Callable[[BaseException], bool]
    is_undefined_table: Callable[[BaseException, str], bool]


def _owns_sqlite(err: BaseException) -> bool:
    return isinstance(err, sqlite3.Error)


def _sqlite_undefined_table(err: BaseException, table: str) -> bool:
    return isinstance(err, sqlite3.OperationalError) and str(err) == f"no such table: {table}"


def _owns_postgres(err: BaseException) -> bool:
    # A psycopg2 error can only exist once psycopg2 has been imported.
    psycopg2 = sys.modules.get("psycopg2")
    return psycopg2 is not None and isinstance(err, psycopg2.Error)


def _postgres_undefined_table(err: BaseException, table: str) -> bool:
    import psycopg2.errors

    if isinstance(err, psycopg2.errors.UndefinedTable):
        return True
    return getattr(err, "pgcode", None) == PG_UNDEFINED_TABLE


_CLASSIFIERS: Final[tuple[_ErrorClassifier, ...]] = (
    _ErrorClassifier("sqlite", _owns_sqlite, _sqlite_undefined_table),
    _ErrorClassifier("postgres", _owns_postgres, _postgres_undefined_table),
)


def classify_error(err: BaseException, table: str) -> ErrorKind:
    """Decide whether ``err`` means the bookkeeping table is missing.

    Args:
        err: Exception raised by the database driver.
        table: Bookkeeping table name.

    Returns:
        ``ErrorKind.MISSING_STORE`` for an undefined-table error on ``table``,
        ``ErrorKind.OTHER`` for any other error of a supported driver.

    Raises:
        UnsupportedDriverError: If no supported driver owns ``err``.
    """
    for classifier in _CLASSIFIERS:
        if classifier.owns(err):
            if classifier.is_undefined_table(err, table):
                return ErrorKind.MISSING_STORE
            return ErrorKind.OTHER
    raise UnsupportedDriverError(f"{type(err).__module__}.{type(err).__qualname__}: {err}")


def resolve_dialect(conn: Any) -> Dialect:
    """Pick the dialect matching a DB-API connection object.

    Unknown drivers get a generic dialect built from their module's
    ``paramstyle``; migrations can run on them, but a missing bookkeeping table
    will be reported as :class:`UnsupportedDriverError`.

    Raises:
        UnsupportedDriverError: If the driver's paramstyle cannot be determined.
    """
    if isinstance(conn, sqlite3.Connection):
        return SQLITE
    driver = type(conn).__module__.partition(".")[0]
    if driver == "psycopg2":
        return POSTGRES
    paramstyle = getattr(sys.modules.get(driver), "paramstyle", None)
    if paramstyle not in ("qmark", "format", "pyformat", "numeric"):
        raise UnsupportedDriverError(f"{driver} paramstyle {paramstyle!r}")
    return Dialect(name=driver, paramstyle=paramstyle, explicit_begin=False)
