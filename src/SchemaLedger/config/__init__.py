from __future__ import annotations

"""Public configuration API for SchemaLedger."""

from SchemaLedger.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from SchemaLedger.config.database import DatabaseConfig
from SchemaLedger.config.migrations import MigrationsConfig
from SchemaLedger.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "DatabaseConfig",
    "MigrationsConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
