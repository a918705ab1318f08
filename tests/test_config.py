import os
import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import tests.support  # noqa: E402,F401
from app.ai.config import load_ai_config  # noqa: E402
from app.ai.factory import get_ai_client  # noqa: E402
from app.core.config import load_settings, settings  # noqa: E402
from app.core.errors import status_for_kind  # noqa: E402
from app.core.rate_limit import rate_limit  # noqa: E402


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = load_settings()

        self.assertIsNone(cfg.gemini_api_key)
        self.assertEqual(cfg.gemini_model, "gemini-3-flash-preview")
        self.assertEqual(cfg.gemini_poll_interval_s, 2.0)
        self.assertEqual(cfg.upload_max_bytes, 20 * 1024 * 1024)
        self.assertEqual(cfg.history_backend, "supabase")
        self.assertTrue(cfg.rate_limit_enabled)

    def test_overrides_and_bad_numbers(self):
        env = {
            "GEMINI_API_KEY": "key-123",
            "GEMINI_POLL_INTERVAL_S": "0.5",
            "GEMINI_POLL_MAX_ATTEMPTS": "not-a-number",
            "HISTORY_BACKEND": " SQLite ",
            "CORS_ALLOWED_ORIGINS": "https://a.example, ,https://b.example",
            "RATE_LIMIT_ENABLED": "off",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_settings()

        self.assertEqual(cfg.gemini_api_key, "key-123")
        self.assertEqual(cfg.gemini_poll_interval_s, 0.5)
        self.assertEqual(cfg.gemini_poll_max_attempts, 150)
        self.assertEqual(cfg.history_backend, "sqlite")
        self.assertEqual(cfg.cors_allowed_origins, ("https://a.example", "https://b.example"))
        self.assertFalse(cfg.rate_limit_enabled)

    def test_unknown_history_backend_is_rejected(self):
        with mock.patch.dict(os.environ, {"HISTORY_BACKEND": "mongo"}, clear=True):
            with self.assertRaises(RuntimeError):
                load_settings()

    def test_missing_key_yields_no_client(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            ai_cfg = load_ai_config(load_settings())
        self.assertIsNone(get_ai_client(ai_cfg))

    def test_rate_limit_is_a_passthrough_when_disabled(self):
        def handler():
            return "ok"

        with mock.patch("app.core.rate_limit.settings", replace(settings, rate_limit_enabled=False)):
            self.assertIs(rate_limit()(handler), handler)

    def test_error_kind_status_codes(self):
        self.assertEqual(status_for_kind("validation"), 400)
        self.assertEqual(status_for_kind("configuration"), 503)
        self.assertEqual(status_for_kind("upstream_timeout"), 504)
        self.assertEqual(status_for_kind("upstream_rejected"), 502)
        self.assertEqual(status_for_kind("upstream_error"), 502)


if __name__ == "__main__":
    unittest.main()
