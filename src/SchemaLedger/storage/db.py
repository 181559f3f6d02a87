"""Database connection helpers."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from SchemaLedger.config import DatabaseConfig


def ensure_db(db_path: Path) -> sqlite3.Connection:
    """Ensure the SQLite database file's directory exists and return a connection.

    Args:
        db_path: Absolute path or project-relative path to database file.

    Returns:
        SQLite connection.

    Raises:
        OSError: If directory creation fails.
        sqlite3.Error: If database connection fails.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db_path))


def connect_postgres(dsn: str) -> Any:
    """Open a psycopg2 connection.

    Raises:
        RuntimeError: If psycopg2 is not installed.
        psycopg2.Error: If the connection fails.
    """
    try:
        import psycopg2
    except ImportError as err:
        raise RuntimeError(
            "psycopg2 is required for PostgreSQL. Install with: pip install 'SchemaLedger[postgres]'"
        ) from err
    return psycopg2.connect(dsn)


def connect(config: DatabaseConfig) -> Any:
    """Open the connection described by the database config section."""
    if config.driver == "postgres":
        return connect_postgres(config.dsn)
    return ensure_db(Path(config.path))


class DatabaseManager:
    """Owns one connection for the lifetime of a CLI command.

    Supports the context manager protocol for automatic connection cleanup.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.conn = connect(config)

    def get_connection(self) -> Any:
        return self.conn

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> DatabaseManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
