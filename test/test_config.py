import os
import tempfile
from unittest import TestCase

from studio.config import AppConfig, config


class TestConfig(TestCase):
    def test_load_config(self):
        self.assertIn("url", config.database)
        self.assertTrue(config.auth.secret_key)
        self.assertEqual(config.billing.overdue_threshold, 7)

    def test_defaults_for_missing_sections(self):
        with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8") as f:
            f.write("database:\n  url: sqlite://\nauth:\n  secret_key: test\n")
            path = f.name
        try:
            loaded = AppConfig.from_yaml(path)
        finally:
            os.remove(path)

        self.assertEqual(loaded.database["url"], "sqlite://")
        self.assertEqual(loaded.auth.token_expire_minutes, 60 * 24 * 7)
        self.assertEqual(loaded.auth.cookie_name, "auth-token")
        self.assertEqual(loaded.billing.overdue_threshold, 7)
        self.assertIsNone(loaded.logging.directory)
