"""Discovery of migration modules.

A migrations directory (or package) holds one module per migration, named
``vNNN_<description>.py``, each exposing a single ``MIGRATION`` constant of
type :class:`~SchemaLedger.storage.migration.Migration`::

    # migrations/v002_add_posts.py
    from SchemaLedger.storage.migration import Migration

    MIGRATION = Migration(
        version=2,
        description="Add posts table",
        sql="CREATE TABLE posts (id INTEGER PRIMARY KEY, title TEXT NOT NULL);",
    )
"""

from __future__ import annotations

import importlib
import importlib.util
import pkgutil
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable

from SchemaLedger.storage.migration import Migration
from SchemaLedger.utils.log import log

_MODULE_NAME_RE = re.compile(r"^v(\d+)_\w+$")


def load_migrations(directory: Path) -> dict[int, Migration]:
    """Load every ``vNNN_*.py`` migration module from a directory.

    Args:
        directory: Directory containing migration modules.

    Returns:
        Mapping of version to migration.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
        ValueError: If a module lacks ``MIGRATION``, its filename number differs
            from the migration version, or versions collide.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"migrations directory not found: {directory}")

    modules: list[ModuleType] = []
    for path in sorted(directory.glob("v*.py")):
        if not _MODULE_NAME_RE.match(path.stem):
            log.debug("Skipping non-migration file %s", path.name)
            continue
        spec = importlib.util.spec_from_file_location(f"_schemaledger_migrations.{path.stem}", path)
        if spec is None or spec.loader is None:
            raise ValueError(f"cannot import migration file {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(spec.name, None)
            raise
        modules.append(module)
    return _collect(modules)


def load_migrations_from_package(package: str) -> dict[int, Migration]:
    """Load every ``vNNN_*`` migration module of an importable package.

    Args:
        package: Dotted package name, e.g. ``myapp.migrations``.

    Returns:
        Mapping of version to migration.
    """
    pkg = importlib.import_module(package)
    names = sorted(
        info.name
        for info in pkgutil.iter_modules(pkg.__path__)
        if _MODULE_NAME_RE.match(info.name)
    )
    return _collect(importlib.import_module(f"{package}.{name}") for name in names)


def _collect(modules: Iterable[ModuleType]) -> dict[int, Migration]:
    migrations: dict[int, Migration] = {}
    for module in modules:
        migration = getattr(module, "MIGRATION", None)
        if not isinstance(migration, Migration):
            raise ValueError(f"{module.__name__} must define MIGRATION = Migration(...)")
        match = _MODULE_NAME_RE.match(module.__name__.rpartition(".")[2])
        if match and int(match.group(1)) != migration.version:
            raise ValueError(
                f"{module.__name__} declares version {migration.version} "
                f"but its filename says {int(match.group(1))}"
            )
        if migration.version in migrations:
            raise ValueError(
                f"duplicate migration version {migration.version} "
                f"(description: {migration.description!r})"
            )
        migrations[migration.version] = migration
    log.debug("Loaded %d migration(s)", len(migrations))
    return migrations
