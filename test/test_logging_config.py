import logging
import os
import tempfile
from datetime import datetime
from unittest import TestCase

from studio.logging_config import setup_logging


def reset_root_logger():
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)


class TestFileLogging(TestCase):
    def tearDown(self):
        reset_root_logger()

    def test_messages_reach_daily_log_file(self):
        with tempfile.TemporaryDirectory() as directory:
            log_file = setup_logging("INFO", directory, "studio_test")

            expected = os.path.join(directory, f"studio_test_{datetime.now().strftime('%Y-%m-%d')}.log")
            self.assertEqual(log_file, expected)

            logger = logging.getLogger("studio.test")
            logger.info("info message")
            logger.debug("debug message")
            for handler in logging.getLogger().handlers:
                handler.flush()

            with open(log_file, encoding="utf-8") as f:
                content = f.read()

            reset_root_logger()

        self.assertIn("studio.test - INFO - info message", content)
        self.assertNotIn("debug message", content)

    def test_console_only(self):
        self.assertIsNone(setup_logging("DEBUG"))
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
