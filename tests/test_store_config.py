"""Tests for the JSON key-value store and settings.

Covers: rt.core.store, rt.core.config
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch


class TestJsonStore(unittest.TestCase):

    def setUp(self):
        from rt.core.store import JsonStore
        self.tmpdir = tempfile.mkdtemp()
        self._tmppath = Path(self.tmpdir)
        self.store = JsonStore(self._tmppath / "current")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_creates_directory(self):
        self.assertTrue((self._tmppath / "current").is_dir())

    def test_missing_key_returns_default(self):
        self.assertIsNone(self.store.read("nothing"))
        self.assertEqual(self.store.read("nothing", default=[]), [])
        self.assertFalse(self.store.exists("nothing"))

    def test_write_then_read(self):
        value = {"active": True, "start_time": "2026-03-14T18:00:00+00:00", "list": [1, 2]}
        self.store.write("session_state_1", value)
        self.assertTrue(self.store.exists("session_state_1"))
        self.assertEqual(self.store.read("session_state_1"), value)
        with open(self._tmppath / "current" / "session_state_1.json", encoding="utf-8") as f:
            self.assertEqual(json.load(f), value)

    def test_write_replaces_previous_value(self):
        self.store.write("ledger", [1])
        self.store.write("ledger", [2, 3])
        self.assertEqual(self.store.read("ledger"), [2, 3])

    def test_corrupt_file_returns_default(self):
        with open(self.store.path_for("stations"), "w") as f:
            f.write("{invalid json!!")
        self.assertEqual(self.store.read("stations", default="fallback"), "fallback")

    def test_unserializable_value_raises_write_failure(self):
        from rt.core.errors import PersistenceWriteFailure
        self.store.write("settings", {"ok": 1})
        with self.assertRaises(PersistenceWriteFailure) as ctx:
            self.store.write("settings", {"bad": object()})
        self.assertEqual(ctx.exception.key, "settings")
        # the previous good document is untouched and no temp files linger
        self.assertEqual(self.store.read("settings"), {"ok": 1})
        self.assertEqual(os.listdir(self._tmppath / "current"), ["settings.json"])

    def test_os_error_raises_write_failure(self):
        from rt.core.errors import PersistenceWriteFailure
        with patch("rt.core.store.os.replace", side_effect=PermissionError("locked")):
            with self.assertRaises(PersistenceWriteFailure):
                self.store.write("ledger", [])
        self.assertFalse(self.store.exists("ledger"))

    def test_write_quietly_swallows_failures(self):
        from rt.core.store import write_quietly
        with patch("rt.core.store.os.replace", side_effect=OSError("nope")):
            self.assertFalse(write_quietly(self.store, "ledger", []))
        self.assertTrue(write_quietly(self.store, "ledger", []))


class TestSettings(unittest.TestCase):

    def setUp(self):
        from rt.core.store import JsonStore
        self.tmpdir = tempfile.mkdtemp()
        self.store = JsonStore(Path(self.tmpdir))

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_defaults_when_nothing_stored(self):
        from rt.core.config import load_settings
        settings = load_settings(self.store)
        self.assertEqual(settings["currency"], "EGP")
        self.assertEqual(settings["default_rate"], "50")
        self.assertEqual(settings["default_fixed_minutes"], "60")
        self.assertEqual(settings["tick_interval_ms"], 1000)
        self.assertTrue(settings["confirm_reset"])

    def test_first_load_writes_defaults(self):
        from rt.core.config import load_settings, build_default_settings
        self.assertFalse(self.store.exists("settings"))
        load_settings(self.store)
        self.assertTrue(self.store.exists("settings"))
        self.assertEqual(self.store.read("settings"), build_default_settings())

    def test_roundtrip(self):
        from rt.core.config import load_settings, save_settings
        settings = load_settings(self.store)
        settings["currency"] = "USD"
        settings["sounds_enabled"] = False
        self.assertTrue(save_settings(self.store, settings))
        loaded = load_settings(self.store)
        self.assertEqual(loaded["currency"], "USD")
        self.assertFalse(loaded["sounds_enabled"])

    def test_missing_and_mistyped_values_defaulted(self):
        from rt.core.config import load_settings
        self.store.write("settings", {
            "currency": "SAR",
            "tick_interval_ms": True,
            "confirm_delete": "yes",
            "default_rate": 70,
        })
        settings = load_settings(self.store)
        self.assertEqual(settings["currency"], "SAR")
        self.assertEqual(settings["tick_interval_ms"], 1000)
        self.assertTrue(settings["confirm_delete"])
        self.assertEqual(settings["default_rate"], "50")
        self.assertFalse(settings["always_on_top"])

    def test_defaulted_values_written_back(self):
        from rt.core.config import load_settings
        self.store.write("settings", {"currency": "SAR", "tick_interval_ms": -5})
        settings = load_settings(self.store)
        self.assertEqual(self.store.read("settings"), settings)
        self.assertEqual(self.store.read("settings")["tick_interval_ms"], 1000)
        self.assertEqual(self.store.read("settings")["currency"], "SAR")

    def test_non_positive_tick_interval_defaulted(self):
        from rt.core.config import load_settings
        self.store.write("settings", {"tick_interval_ms": 0})
        self.assertEqual(load_settings(self.store)["tick_interval_ms"], 1000)

    def test_unknown_keys_dropped(self):
        from rt.core.config import load_settings
        self.store.write("settings", {"theme": "Galaxy Dark"})
        self.assertNotIn("theme", load_settings(self.store))

    def test_non_dict_settings_fall_back(self):
        from rt.core.config import load_settings, build_default_settings
        self.store.write("settings", ["nope"])
        self.assertEqual(load_settings(self.store), build_default_settings())
        self.assertEqual(self.store.read("settings"), build_default_settings())


if __name__ == "__main__":
    unittest.main()
