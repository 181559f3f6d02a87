"""Command runner for coordinating CLI execution.

Manages logging configuration, the database connection lifecycle and
error handling for command execution.
"""

from __future__ import annotations

from pathlib import Path

import click

from SchemaLedger.cli.commands import MigrateCommand, StatusCommand
from SchemaLedger.config import AppConfig
from SchemaLedger.storage.db import DatabaseManager
from SchemaLedger.storage.loader import load_migrations
from SchemaLedger.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_migrate(self, action: str) -> None:
        """Load migrations from the configured directory and apply them.

        Raises:
            click.Abort: When loading or applying migrations fails.
        """
        self._configure_logging(action)
        try:
            migrations = load_migrations(Path(self.config.migrations.dir))
            with DatabaseManager(self.config.database) as db_manager:
                MigrateCommand(
                    conn=db_manager.get_connection(),
                    migrations=migrations,
                    table=self.config.database.table,
                ).execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Migration failed: %s", e)
            raise click.Abort from e

    def run_status(self, action: str) -> None:
        """Print applied and pending migrations.

        Raises:
            click.Abort: When the status query fails.
        """
        self._configure_logging(action)
        try:
            migrations = load_migrations(Path(self.config.migrations.dir))
            with DatabaseManager(self.config.database) as db_manager:
                StatusCommand(
                    conn=db_manager.get_connection(),
                    migrations=migrations,
                    table=self.config.database.table,
                ).execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Status failed: %s", e)
            raise click.Abort from e

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
