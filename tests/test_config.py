"""Tests for environment-driven settings."""

from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

from pocketchat.config import Settings


class SettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings()
        self.assertEqual(settings.provider_label, "GPT 4.1")
        self.assertEqual(settings.reply_delay_seconds, 0.5)
        self.assertEqual(settings.history_path.name, "chatHistory.json")

    def test_env_overrides(self) -> None:
        env = {
            "POCKETCHAT_HISTORY_PATH": "/tmp/elsewhere/history.json",
            "POCKETCHAT_REPLY_DELAY_SECONDS": "0",
            "POCKETCHAT_PROVIDER_LABEL": "Local",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = Settings()
        self.assertEqual(settings.history_path, Path("/tmp/elsewhere/history.json"))
        self.assertEqual(settings.reply_delay_seconds, 0.0)
        self.assertEqual(settings.provider_label, "Local")


if __name__ == "__main__":
    unittest.main()
