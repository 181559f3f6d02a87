"""Tests for logger configuration."""

from __future__ import annotations

import logging
import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from SchemaLedger.utils.log import configure_logging, log


class TestConfigureLogging(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.log_dir = Path(self._tmpdir.name) / "log"

    def tearDown(self) -> None:
        configure_logging(level="INFO")
        self._tmpdir.cleanup()

    def _file_handlers(self) -> list[logging.FileHandler]:
        return [h for h in log.handlers if isinstance(h, logging.FileHandler)]

    def test_file_handler_writes_under_action_dir(self) -> None:
        log_path = configure_logging(level="INFO", action="migrate", log_to_file=True, log_dir=str(self.log_dir))

        log.debug("written to file only")
        for handler in log.handlers:
            handler.flush()

        self.assertIsNotNone(log_path)
        self.assertEqual(log_path.parent, self.log_dir / "migrate")
        self.assertIn("[DEBG] written to file only", log_path.read_text(encoding="utf-8"))

    def test_reconfiguring_closes_previous_handlers(self) -> None:
        configure_logging(level="INFO", action="migrate", log_to_file=True, log_dir=str(self.log_dir))
        (first,) = self._file_handlers()

        configure_logging(level="INFO", action="status", log_to_file=True, log_dir=str(self.log_dir))

        self.assertIsNone(first.stream)
        self.assertNotIn(first, log.handlers)
        self.assertEqual(len(self._file_handlers()), 1)

    def test_console_only_has_no_file(self) -> None:
        self.assertIsNone(configure_logging(level="DEBUG"))
        self.assertEqual(self._file_handlers(), [])
        self.assertEqual(log.level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
