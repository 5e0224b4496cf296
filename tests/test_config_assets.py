import logging
import os
import tempfile
import unittest

from game import (
    DEFAULT_ICONS,
    PLACEHOLDER_GLYPH,
    AssetResolver,
    GameConfig,
    parse_icons,
    setup_logging,
)


class TestGameConfig(unittest.TestCase):
    def test_given_empty_env_when_loading_then_defaults(self):
        cfg = GameConfig.from_env({})
        self.assertEqual(cfg.icons, DEFAULT_ICONS)
        self.assertEqual(cfg.mismatch_delay_ms, 1000)
        self.assertEqual(cfg.win_delay_ms, 500)
        self.assertIsNone(cfg.seed)
        self.assertEqual(cfg.log_level, "INFO")

    def test_given_env_overrides_when_loading_then_values_applied(self):
        cfg = GameConfig.from_env({
            "MEMORY_ICONS": "cat, dog ,owl",
            "MEMORY_MISMATCH_DELAY_MS": "0",
            "MEMORY_WIN_DELAY_MS": "250",
            "MEMORY_SEED": "17",
            "MEMORY_LOG_LEVEL": "DEBUG",
            "MEMORY_STATIC_DIR": "/tmp/static",
        })
        self.assertEqual(cfg.icons, ("cat", "dog", "owl"))
        self.assertEqual(cfg.mismatch_delay_ms, 0)
        self.assertEqual(cfg.win_delay_ms, 250)
        self.assertEqual(cfg.seed, 17)
        self.assertEqual(cfg.log_level, "DEBUG")
        self.assertEqual(cfg.static_dir, "/tmp/static")

    def test_given_bad_env_values_when_loading_then_value_error(self):
        with self.assertRaises(ValueError):
            GameConfig.from_env({"MEMORY_MISMATCH_DELAY_MS": "soon"})
        with self.assertRaises(ValueError):
            GameConfig.from_env({"MEMORY_WIN_DELAY_MS": "-5"})
        with self.assertRaises(ValueError):
            GameConfig.from_env({"MEMORY_ICONS": "a,b,a"})
        with self.assertRaises(ValueError):
            parse_icons(" , ")

    def test_given_level_name_when_setting_up_logging_then_logger_configured(self):
        logger = setup_logging("debug")
        self.assertEqual(logger.name, "memory_core")
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        setup_logging("INFO")
        self.assertEqual(len(logger.handlers), 1)


class TestAssetResolver(unittest.TestCase):
    def test_given_existing_image_when_resolving_then_static_url(self):
        with tempfile.TemporaryDirectory() as tmp:
            os.makedirs(os.path.join(tmp, "images"))
            with open(os.path.join(tmp, "images", "g.png"), "wb") as f:
                f.write(b"\x89PNG")
            resolver = AssetResolver(tmp, {"guitar": "images/g.png"})
            face = resolver.resolve("guitar")
            self.assertEqual(face.src, "/static/images/g.png")
            self.assertIsNone(face.glyph)

    def test_given_missing_image_when_resolving_then_placeholder_and_warning(self):
        with tempfile.TemporaryDirectory() as tmp:
            resolver = AssetResolver(tmp, {"guitar": "images/missing.png"})
            with self.assertLogs("memory_core.assets", level="WARNING"):
                face = resolver.resolve("guitar")
            self.assertIsNone(face.src)
            self.assertEqual(face.glyph, PLACEHOLDER_GLYPH)
            # Cached: no second warning, same answer.
            self.assertIs(resolver.resolve("guitar"), face)

    def test_given_unmapped_icon_when_resolving_then_placeholder(self):
        resolver = AssetResolver("/nonexistent")
        face = resolver.resolve("kazoo")
        self.assertIsNone(face.src)
        self.assertEqual(face.glyph, PLACEHOLDER_GLYPH)
        self.assertNotIn("kazoo", resolver._cache)


if __name__ == "__main__":
    unittest.main(verbosity=2)
