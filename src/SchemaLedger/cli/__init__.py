"""CLI package for SchemaLedger.

Click definitions live in ``ui``, resource handling in ``runner`` and the
command logic in ``commands``.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from SchemaLedger.cli.runner import CommandRunner
from SchemaLedger.cli.ui import cli


def main() -> None:
    """Run SchemaLedger CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
