"""Database domain configuration: driver, location and bookkeeping table."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from SchemaLedger.config.common import (
    check_non_empty,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)
from SchemaLedger.storage.bookkeeping import TABLE_NAME_RE

_ALLOWED_DRIVERS = {"sqlite", "postgres"}


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection settings.

    ``path`` is used by the sqlite driver; ``dsn`` (read from the environment
    variable named by ``dsn_env``) by the postgres driver.
    """

    driver: str
    path: str
    dsn_env: str
    dsn: str
    table: str


def load_database(raw: Mapping[str, Any]) -> DatabaseConfig:
    """Load database domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "database", required=True)
    dsn_env = expect_str(get_optional_value(section, "dsn_env", "DATABASE_URL"), "database.dsn_env")
    return DatabaseConfig(
        driver=expect_str(get_required_value(section, "driver", "database.driver"), "database.driver").lower(),
        path=expect_str(get_optional_value(section, "path", ""), "database.path"),
        dsn_env=dsn_env,
        dsn=os.getenv(dsn_env, "").strip(),
        table=expect_str(get_optional_value(section, "table", "schema_migrations"), "database.table"),
    )


def check_database(config: DatabaseConfig) -> None:
    """Validate database domain constraints.

    Raises:
        ValueError: If values violate database constraints.
    """
    if config.driver not in _ALLOWED_DRIVERS:
        raise ValueError(f"database.driver must be one of {sorted(_ALLOWED_DRIVERS)}")
    if not TABLE_NAME_RE.fullmatch(config.table):
        raise ValueError("database.table must be a plain SQL identifier")
    if config.driver == "sqlite":
        check_non_empty(config.path, "database.path")
    elif not config.dsn:
        raise ValueError(
            f"database.driver is postgres but {config.dsn_env} environment variable not set. "
            "Set it in your .env file or shell environment."
        )
