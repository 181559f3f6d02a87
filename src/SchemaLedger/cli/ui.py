"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from SchemaLedger.cli.runner import CommandRunner
from SchemaLedger.config import load_config, load_config_with_defaults

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@click.group(help="SchemaLedger: apply numbered schema migrations exactly once.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the defaults file.",
)
@click.option(
    "--defaults",
    "defaults_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the defaults YAML file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path, defaults_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config,
    so a postgres DSN can live there. The config file is deep-merged over
    the defaults file; without a defaults file it must be complete.
    """
    load_dotenv()
    if defaults_path.is_file():
        ctx.obj = load_config_with_defaults(config_path, default_path=defaults_path)
    else:
        ctx.obj = load_config(config_path)


@cli.command("migrate")
@click.pass_context
def migrate_cmd(ctx: click.Context) -> None:
    """Apply every outstanding migration in ascending version order."""
    CommandRunner(ctx.obj).run_migrate(action=ctx.command.name)


@cli.command("status")
@click.pass_context
def status_cmd(ctx: click.Context) -> None:
    """List applied and pending migration versions."""
    CommandRunner(ctx.obj).run_status(action=ctx.command.name)
