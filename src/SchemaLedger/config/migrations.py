"""Migrations domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from SchemaLedger.config.common import check_non_empty, expect_str, get_required_value, get_section


@dataclass(frozen=True, slots=True)
class MigrationsConfig:
    """Where migration modules are discovered."""

    dir: str


def load_migrations_config(raw: Mapping[str, Any]) -> MigrationsConfig:
    section = get_section(raw, "migrations", required=True)
    return MigrationsConfig(
        dir=expect_str(get_required_value(section, "dir", "migrations.dir"), "migrations.dir"),
    )


def check_migrations_config(config: MigrationsConfig) -> None:
    check_non_empty(config.dir, "migrations.dir")
