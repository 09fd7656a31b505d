from __future__ import annotations

import json
import os
from pathlib import Path
from tempfile import TemporaryDirectory
import unittest
from unittest import mock

from core.settings import LOG_LEVEL_ENV, EditorSettings, load_settings, save_settings


class SettingsTests(unittest.TestCase):
    def test_round_trip(self) -> None:
        settings = EditorSettings(image_dir="/pics", default_save_ext=".bmp", batch_suffix="_gs", log_level="DEBUG")
        with TemporaryDirectory() as td:
            path = Path(td) / "nested" / "settings.json"
            save_settings(settings, str(path))
            loaded = load_settings(str(path))
        self.assertEqual(loaded, settings)

    def test_missing_file_gives_defaults(self) -> None:
        with TemporaryDirectory() as td:
            loaded = load_settings(str(Path(td) / "absent.json"))
        self.assertEqual(loaded, EditorSettings())

    def test_partial_file_fills_defaults(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "legacy.json"
            path.write_text(json.dumps({"settings": {"default_save_ext": "TIF", "window_w": 50}}), encoding="utf-8")
            loaded = load_settings(str(path))
        self.assertEqual(loaded.default_save_ext, ".tif")
        self.assertEqual(loaded.window_w, 200)
        self.assertEqual(loaded.batch_suffix, "_edited")

    def test_corrupt_file_gives_defaults(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "broken.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("core.settings", level="WARNING"):
                loaded = load_settings(str(path))
        self.assertEqual(loaded, EditorSettings())

    def test_env_overrides_log_level(self) -> None:
        settings = EditorSettings(log_level="INFO")
        with mock.patch.dict(os.environ, {LOG_LEVEL_ENV: "debug"}):
            self.assertEqual(settings.effective_log_level(), "DEBUG")
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(settings.effective_log_level(), "INFO")


if __name__ == "__main__":
    unittest.main()
