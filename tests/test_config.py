"""Test settings module"""

# pyright: basic

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

from lmprompt.config.config import (
    BuilderSettings,
    RenderSettings,
    Settings,
    format_pydantic_error_message,
    load_settings,
)


class TestSettings(unittest.TestCase):

    def test_default_settings(self):
        sets = Settings()
        self.assertTrue(sets.render.trim_blocks)
        self.assertTrue(sets.render.lstrip_blocks)
        self.assertFalse(sets.render.keep_trailing_newline)
        self.assertTrue(sets.render.snake_case_properties)
        self.assertEqual(sets.render.raise_function_name, "raise_exception")
        self.assertEqual(sets.builder.default_variant, "default")
        self.assertTrue(sets.builder.add_generation_prompt)

    def test_set_settings_given(self):
        sets = Settings(**{'render': {'trim_blocks': False}})
        self.assertFalse(sets.render.trim_blocks)
        # unmentioned setting still set
        self.assertTrue(sets.render.lstrip_blocks)

    def test_set_settings_given_invalid_variant(self):
        with self.assertRaises(ValidationError):
            Settings(builder={'default_variant': "chat"})

    def test_set_settings_invalid_function_name(self):
        with self.assertRaises(ValidationError):
            RenderSettings(raise_function_name="raise exception")

    def test_set_settings_unknown_field(self):
        with self.assertRaises(ValidationError):
            BuilderSettings(variant="tool")  # type: ignore

    def test_frozen(self):
        sets = Settings()
        with self.assertRaises(ValidationError):
            sets.render.trim_blocks = False  # type: ignore

    def test_environment(self):
        with patch.dict(
            os.environ, {'LMPROMPT_BUILDER__DEFAULT_VARIANT': "rag"}
        ):
            sets = Settings()
        self.assertEqual(sets.builder.default_variant, "rag")

    def test_cache_size_positive(self):
        with self.assertRaises(ValidationError):
            RenderSettings(template_cache_size=0)


class TestSettingsFile(unittest.TestCase):

    def test_load(self):
        with tempfile.TemporaryDirectory() as folder:
            path = Path(folder) / "prompts.toml"
            path.write_text(
                "[render]\nlstrip_blocks = false\n\n"
                "[builder]\ndefault_variant = \"tool\"\n",
                encoding="utf-8",
            )
            loaded = load_settings(path)
        self.assertFalse(loaded.render.lstrip_blocks)
        self.assertTrue(loaded.render.trim_blocks)
        self.assertEqual(loaded.builder.default_variant, "tool")

    def test_environment_overrides_file(self):
        with tempfile.TemporaryDirectory() as folder:
            path = Path(folder) / "prompts.toml"
            path.write_text(
                "[builder]\ndefault_variant = \"tool\"\n", encoding="utf-8"
            )
            with patch.dict(
                os.environ, {'LMPROMPT_BUILDER__DEFAULT_VARIANT': "rag"}
            ):
                loaded = load_settings(path)
        self.assertEqual(loaded.builder.default_variant, "rag")

    def test_load_missing(self):
        with tempfile.TemporaryDirectory() as folder:
            with self.assertRaises(FileNotFoundError):
                load_settings(Path(folder) / "config.toml")

    def test_load_invalid(self):
        with tempfile.TemporaryDirectory() as folder:
            path = Path(folder) / "config.toml"
            path.write_text(
                "[builder]\ndefault_variant = \"chat\"\n", encoding="utf-8"
            )
            with self.assertRaises(ValueError):
                load_settings(path)

    def test_load_malformed(self):
        with tempfile.TemporaryDirectory() as folder:
            path = Path(folder) / "config.toml"
            path.write_text("[builder\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_settings(path)

    def test_format_error_message(self):
        message = "1 validation error\n  For further information visit x"
        self.assertEqual(
            format_pydantic_error_message(message), "1 validation error"
        )


if __name__ == "__main__":
    unittest.main()
