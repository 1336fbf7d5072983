"""Tests for configuration manager and settings."""
import os
import unittest
import tempfile
import shutil
from pathlib import Path
from unittest import mock

from spendflow.config import AppSettings, Config, ConfigManager
from spendflow.utils.exceptions import ConfigError

CLEAN_ENV = {"GEMINI_API_KEY": "", "SPENDFLOW_LOG_LEVEL": "", "SPENDFLOW_MODEL": ""}


class TestConfigManager(unittest.TestCase):
    """Test ConfigManager functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.config_manager = ConfigManager(config_dir=self.test_dir)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    @mock.patch.dict(os.environ, CLEAN_ENV)
    def test_save_and_load_config(self):
        """Test saving and loading configuration."""
        config = Config(gemini_api_key="test_key", log_level="DEBUG", model_name="gemini-test")

        self.config_manager.save_config(config)
        loaded_config = self.config_manager.load_config()

        self.assertEqual(loaded_config, config)

    @mock.patch.dict(os.environ, CLEAN_ENV)
    def test_no_config(self):
        self.assertIsNone(self.config_manager.load_config())

    @mock.patch.dict(os.environ, {"GEMINI_API_KEY": "env_key", "SPENDFLOW_LOG_LEVEL": "warning", "SPENDFLOW_MODEL": ""})
    def test_environment_overrides(self):
        self.config_manager.save_config(Config(gemini_api_key="file_key"))
        config = self.config_manager.load_config()

        self.assertEqual(config.gemini_api_key, "env_key")
        self.assertEqual(config.log_level, "WARNING")
        self.assertIsNone(config.model_name)

    @mock.patch.dict(os.environ, CLEAN_ENV)
    def test_corrupt_file(self):
        self.config_manager.config_file.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigError):
            self.config_manager.load_config()

    def test_validate_config_valid(self):
        """Test validation with valid config."""
        is_valid, message = self.config_manager.validate_config(Config(gemini_api_key="test_key"))
        self.assertTrue(is_valid)

    def test_validate_config_missing_key(self):
        """Test validation with missing API key."""
        is_valid, message = self.config_manager.validate_config(Config(gemini_api_key=""))
        self.assertFalse(is_valid)
        self.assertIn("API key", message)

    def test_validate_config_bad_level(self):
        is_valid, message = self.config_manager.validate_config(Config(gemini_api_key="k", log_level="LOUD"))
        self.assertFalse(is_valid)
        self.assertIn("log level", message)


class TestAppSettings(unittest.TestCase):
    """Test settings.yaml loading."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_packaged_defaults(self):
        settings = AppSettings.load()
        self.assertEqual(settings.app_name, "SpendFlow")
        self.assertEqual(settings.import_max_file_size_mb, 20)
        self.assertEqual(settings.csv_encodings, ["utf-8-sig", "utf-8", "cp1251"])
        self.assertEqual(settings.llm_max_transactions, 200)
        self.assertEqual(settings.llm_description_max_length, 140)
        self.assertEqual(settings.llm_timeout_seconds, 15.0)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            AppSettings.load(self.test_dir / "missing.yaml")

    def test_missing_section(self):
        path = self.test_dir / "settings.yaml"
        path.write_text("app:\n  name: X\n  version: 1\n", encoding="utf-8")
        with self.assertRaises(ConfigError):
            AppSettings.load(path)

    def test_environment_path(self):
        path = self.test_dir / "settings.yaml"
        path.write_text("app: {}\n", encoding="utf-8")
        with mock.patch.dict(os.environ, {"SPENDFLOW_SETTINGS": str(path)}):
            with self.assertRaises(ConfigError):
                AppSettings.load()


if __name__ == "__main__":
    unittest.main()
