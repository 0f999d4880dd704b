"""Unit tests for settings, logging setup and time helpers."""
import logging
import unittest
from unittest.mock import patch

from matchday.utils.config import Settings
from matchday.utils.logging_setup import configure_logging
from matchday.utils.time_utils import format_minutes


class TestSettings(unittest.TestCase):
    """Test reading settings from the environment."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        self.assertEqual(settings.backend_url, "http://localhost:3001")
        self.assertIsNone(settings.auth_token)
        self.assertEqual(settings.autosave_debounce, 2.5)
        self.assertEqual(settings.log_level, "INFO")

    def test_overrides(self) -> None:
        settings = Settings.from_env({
            "MATCHDAY_BACKEND_URL": "https://api.example.org/",
            "MATCHDAY_AUTH_TOKEN": "secret",
            "MATCHDAY_HTTP_TIMEOUT": "4",
            "MATCHDAY_AUTOSAVE_DEBOUNCE_SECONDS": "0.5",
            "MATCHDAY_LOG_LEVEL": "debug",
        })
        self.assertEqual(settings.backend_url, "https://api.example.org")
        self.assertEqual(settings.auth_token, "secret")
        self.assertEqual(settings.http_timeout, 4.0)
        self.assertEqual(settings.autosave_debounce, 0.5)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_blank_values_use_defaults(self) -> None:
        settings = Settings.from_env({"MATCHDAY_AUTH_TOKEN": "", "MATCHDAY_HTTP_TIMEOUT": " "})
        self.assertIsNone(settings.auth_token)
        self.assertEqual(settings.http_timeout, 10.0)

    def test_invalid_numbers(self) -> None:
        with self.assertRaises(ValueError):
            Settings.from_env({"MATCHDAY_HTTP_TIMEOUT": "soon"})
        with self.assertRaises(ValueError):
            Settings.from_env({"MATCHDAY_AUTOSAVE_DEBOUNCE_SECONDS": "-1"})


class TestLoggingSetup(unittest.TestCase):

    def test_level_applied_to_package_logger(self) -> None:
        with patch("logging.basicConfig") as basic_config:
            configure_logging("warning")
        basic_config.assert_called_once()
        self.assertEqual(logging.getLogger("matchday").level, logging.WARNING)

    def test_unknown_level_falls_back_to_info(self) -> None:
        with patch("logging.basicConfig"):
            configure_logging("chatty")
        self.assertEqual(logging.getLogger("matchday").level, logging.INFO)

    def tearDown(self) -> None:
        logging.getLogger("matchday").setLevel(logging.NOTSET)


class TestFormatMinutes(unittest.TestCase):

    def test_format(self) -> None:
        self.assertEqual(format_minutes(45), "45 min")
        self.assertEqual(format_minutes(120), "2h")
        self.assertEqual(format_minutes(990), "16h 30min")


if __name__ == "__main__":
    unittest.main()
