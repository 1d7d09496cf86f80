"""Tests for configuration loading and validation."""

from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from chat_composer.config import DEFAULT_CONFIG, ComposerSettings, load_config
from chat_composer.constants import SnippetMarkers


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def _load(self, body: str) -> dict:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(body.strip(), encoding="utf-8")
            return load_config(config_path=config_path)

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(config_path=Path(temp_dir) / "config.toml")
        self.assertEqual(config, DEFAULT_CONFIG)
        composer = config["composer"]
        self.assertEqual(composer["allow_image_attachment"], "yes")
        self.assertEqual(composer["maximum_rows"], 20)
        self.assertEqual(composer["maximum_image_attachments_per_message"], 10)
        self.assertEqual(composer["snippet_begin_marker"], "----BEGIN-SNIPPET----")
        self.assertEqual(composer["snippet_end_marker"], "----END-SNIPPET----")

    def test_partial_config_overrides_selected_values(self) -> None:
        config = self._load(
            """
[composer]
maximum_rows = 8
allow_image_attachment = "warn"

[logging]
level = "debug"
            """
        )
        self.assertEqual(config["composer"]["maximum_rows"], 8)
        self.assertEqual(config["composer"]["allow_image_attachment"], "warn")
        self.assertEqual(config["logging"]["level"], "DEBUG")
        self.assertEqual(config["app"]["title"], DEFAULT_CONFIG["app"]["title"])
        self.assertEqual(
            config["composer"]["maximum_image_attachments_per_message"],
            DEFAULT_CONFIG["composer"]["maximum_image_attachments_per_message"],
        )

    def test_boolean_image_policy_is_normalized(self) -> None:
        config = self._load("[composer]\nallow_image_attachment = false")
        self.assertEqual(config["composer"]["allow_image_attachment"], "no")

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        config = self._load("[composer]\nmaximum_rows = 0")
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_overlapping_markers_fall_back_to_defaults(self) -> None:
        config = self._load(
            """
[composer]
snippet_begin_marker = "SNIP"
snippet_end_marker = "SNIP-END"
            """
        )
        self.assertEqual(
            config["composer"]["snippet_begin_marker"],
            DEFAULT_CONFIG["composer"]["snippet_begin_marker"],
        )

    def test_unparseable_toml_uses_defaults(self) -> None:
        config = self._load("[composer\nmaximum_rows = ")
        self.assertEqual(config, DEFAULT_CONFIG)


class ComposerSettingsTests(unittest.TestCase):
    """Validate the runtime settings derived from config."""

    def test_from_config(self) -> None:
        config = {
            "composer": {
                "allow_image_attachment": "warn",
                "maximum_rows": 5,
                "maximum_image_attachments_per_message": 3,
                "snippet_begin_marker": "<<<",
                "snippet_end_marker": ">>>",
                "resize_debounce_ms": 250,
            }
        }
        settings = ComposerSettings.from_config(config)
        self.assertEqual(settings.maximum_rows, 5)
        self.assertEqual(settings.maximum_image_attachments_per_message, 3)
        self.assertEqual(settings.markers, SnippetMarkers("<<<", ">>>"))
        self.assertAlmostEqual(settings.resize_debounce_seconds, 0.25)
        self.assertEqual(settings.oversized_length, 80 * 5)

    def test_policy_properties(self) -> None:
        expectations = {"yes": (True, True), "warn": (True, False), "no": (False, False)}
        for policy, (allowed, forwarded) in expectations.items():
            with self.subTest(policy=policy):
                settings = ComposerSettings(allow_image_attachment=policy)
                self.assertEqual(settings.images_allowed, allowed)
                self.assertEqual(settings.forward_attachments, forwarded)


if __name__ == "__main__":
    unittest.main()
