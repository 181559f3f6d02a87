"""Tests for migration module discovery."""

from __future__ import annotations

import importlib
import sqlite3
import sys
import tempfile
import textwrap
import unittest
import uuid
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from SchemaLedger.storage.loader import load_migrations, load_migrations_from_package
from SchemaLedger.storage.migration import Migration, run_migrations


def _write(directory: Path, name: str, body: str) -> None:
    (directory / name).write_text(textwrap.dedent(body), encoding="utf-8")


_V1 = """
    from SchemaLedger.storage.migration import Migration

    MIGRATION = Migration(version=1, description="users", sql="CREATE TABLE users (id INTEGER);")
"""

_V2 = """
    from SchemaLedger.storage.migration import Migration

    MIGRATION = Migration(version=2, description="posts", sql="CREATE TABLE posts (id INTEGER);")
"""


class TestLoadMigrations(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmpdir.name)

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_loads_modules_by_version(self) -> None:
        _write(self.dir, "v001_users.py", _V1)
        _write(self.dir, "v002_posts.py", _V2)

        migrations = load_migrations(self.dir)

        self.assertEqual(sorted(migrations), [1, 2])
        self.assertIsInstance(migrations[1], Migration)
        self.assertEqual(migrations[2].description, "posts")

    def test_ignores_non_migration_files(self) -> None:
        _write(self.dir, "v001_users.py", _V1)
        _write(self.dir, "helpers.py", "raise RuntimeError('must not be imported')\n")
        _write(self.dir, "version.py", "raise RuntimeError('must not be imported')\n")

        self.assertEqual(sorted(load_migrations(self.dir)), [1])

    def test_duplicate_version_rejected(self) -> None:
        _write(self.dir, "v001_users.py", _V1)
        _write(self.dir, "v001_again.py", _V1)
        with self.assertRaisesRegex(ValueError, "duplicate migration version 1"):
            load_migrations(self.dir)

    def test_module_without_migration_rejected(self) -> None:
        _write(self.dir, "v001_empty.py", "X = 1\n")
        with self.assertRaisesRegex(ValueError, "MIGRATION"):
            load_migrations(self.dir)

    def test_missing_directory(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_migrations(self.dir / "nope")

    def test_filename_number_must_match_version(self) -> None:
        _write(self.dir, "v003_users.py", _V1.replace("version=1", "version=7"))
        with self.assertRaisesRegex(ValueError, "declares version 7 but its filename says 3"):
            load_migrations(self.dir)

    def test_leading_zeros_in_filename(self) -> None:
        _write(self.dir, "v0002_posts.py", _V2)
        self.assertEqual(sorted(load_migrations(self.dir)), [2])

    def test_failed_import_not_left_registered(self) -> None:
        _write(self.dir, "v001_broken.py", "raise RuntimeError('broken migration')\n")
        with self.assertRaisesRegex(RuntimeError, "broken migration"):
            load_migrations(self.dir)
        self.assertNotIn("_schemaledger_migrations.v001_broken", sys.modules)


class TestLoadMigrationsFromPackage(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)
        sys.path.insert(0, str(self.root))
        self.addCleanup(self._cleanup)

    def _cleanup(self) -> None:
        sys.path.remove(str(self.root))
        for name in [n for n in sys.modules if n.startswith("_ledger_pkg_")]:
            del sys.modules[name]
        self._tmpdir.cleanup()

    def _package(self, modules: dict[str, str]) -> str:
        name = f"_ledger_pkg_{uuid.uuid4().hex}"
        package_dir = self.root / name
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("", encoding="utf-8")
        for filename, body in modules.items():
            _write(package_dir, filename, body)
        importlib.invalidate_caches()
        return name

    def test_loads_package_modules_by_version(self) -> None:
        package = self._package(
            {
                "v001_users.py": _V1,
                "v002_posts.py": _V2,
                "helpers.py": "raise RuntimeError('must not be imported')\n",
            }
        )

        migrations = load_migrations_from_package(package)

        self.assertEqual(sorted(migrations), [1, 2])
        self.assertEqual(migrations[1].description, "users")
        self.assertNotIn(f"{package}.helpers", sys.modules)

    def test_duplicate_version_rejected(self) -> None:
        package = self._package({"v001_users.py": _V1, "v001_again.py": _V1})
        with self.assertRaisesRegex(ValueError, "duplicate migration version 1"):
            load_migrations_from_package(package)

    def test_module_without_migration_rejected(self) -> None:
        package = self._package({"v001_empty.py": "X = 1\n"})
        with self.assertRaisesRegex(ValueError, "MIGRATION"):
            load_migrations_from_package(package)

    def test_filename_number_must_match_version(self) -> None:
        package = self._package({"v002_users.py": _V1})
        with self.assertRaisesRegex(ValueError, "filename says 2"):
            load_migrations_from_package(package)

    def test_missing_package(self) -> None:
        with self.assertRaises(ModuleNotFoundError):
            load_migrations_from_package(f"_ledger_pkg_{uuid.uuid4().hex}")


class TestBundledMigrations(unittest.TestCase):
    """The sample migrations shipped in the repository apply cleanly."""

    def test_apply_bundled_migrations(self) -> None:
        migrations = load_migrations(REPO_ROOT / "migrations")
        conn = sqlite3.connect(":memory:")
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            report = run_migrations(conn, migrations)
            self.assertEqual(report.applied, tuple(sorted(migrations)))
            conn.execute("SELECT id, email FROM users").fetchall()
            conn.execute("SELECT id, user_id, title FROM posts").fetchall()
        finally:
            conn.close()


if __name__ == "__main__":
    unittest.main()
