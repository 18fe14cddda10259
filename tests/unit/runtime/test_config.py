"""Tests for config persistence and input sanitization.

Validates keymap, view-option and snapshot round-tripping.
Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treelistview.input import Action, Keymap
from treelistview.runtime import config
from treelistview.tree_model import MemoryTree
from treelistview.view import ScrollPolicy, TreeViewState, ViewOptions, ViewSnapshot


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_file_loads_as_empty_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "missing" / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_keymap_profile(), "default")
                self.assertEqual(config.load_key_overrides(), {})
                self.assertEqual(config.load_view_options(), ViewOptions())
                self.assertIsNone(config.load_view_snapshot("work"))

    def test_malformed_file_is_ignored_and_logged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("{not json", encoding="utf-8")
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                with self.assertLogs("treelistview.runtime.config", level="DEBUG"):
                    self.assertEqual(config.load_config(), {})

    def test_non_object_json_loads_as_empty_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2]", encoding="utf-8")
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

    def test_save_creates_parent_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"hello": "world"})
                self.assertEqual(config.load_config(), {"hello": "world"})

    def test_keymap_profile_and_overrides_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_keymap_profile("vim")
                config.save_key_overrides({"x": "delete", "d": None, "z": "explode"})

                self.assertEqual(config.load_keymap_profile(), "vim")
                overrides = config.load_key_overrides()
                self.assertEqual(overrides, {"x": Action.DELETE, "d": None})

                keymap = Keymap(config.load_keymap_profile(), overrides)
                self.assertIsNone(keymap.resolve("UP"))
                self.assertIs(keymap.resolve("x"), Action.DELETE)

    def test_load_key_overrides_sanitizes_invalid_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_config(
                    {
                        "keymap": {
                            "profile": "emacs",
                            "bindings": {"": "quit", "m": "MARK", "n": 7, "o": "nope"},
                        }
                    }
                )
                self.assertEqual(config.load_keymap_profile(), "default")
                self.assertEqual(config.load_key_overrides(), {"m": Action.MARK})

    def test_view_options_round_trip(self) -> None:
        options = ViewOptions(
            show_root=True,
            default_expansion="all",
            scroll_policy=ScrollPolicy.CENTER,
            viewport_height=7,
        )
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_view_options(options)
                self.assertEqual(config.load_view_options(), options)

    def test_load_view_options_falls_back_per_field(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_config(
                    {
                        "view": {
                            "show_root": "yes",
                            "default_expansion": "all",
                            "scroll_policy": "sideways",
                            "viewport_height": True,
                        }
                    }
                )
                self.assertEqual(config.load_view_options(), ViewOptions(default_expansion="all"))

    def test_view_snapshot_round_trip_restores_state(self) -> None:
        tree = MemoryTree.from_mapping({"A": {"A1": {}, "A2": {}}, "B": {}})
        state = TreeViewState(tree)
        state.select("A2")
        state.toggle_mark("B")

        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_view_snapshot("work", state.snapshot())
                loaded = config.load_view_snapshot("work")
                self.assertTrue(config.delete_view_snapshot("work"))
                self.assertIsNone(config.load_view_snapshot("work"))

        self.assertIsInstance(loaded, ViewSnapshot)
        restored = TreeViewState(tree, options=ViewOptions(default_expansion="none"))
        restored.restore(loaded)
        self.assertEqual(restored.selected_id, "A2")
        self.assertIn("B", restored.marks)

    def test_unserializable_snapshot_is_not_written(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("treelistview.runtime.config.CONFIG_PATH", config_path):
                config.save_view_snapshot("bad", ViewSnapshot(selected=object()))
                self.assertFalse(config_path.exists())


if __name__ == "__main__":
    unittest.main()
