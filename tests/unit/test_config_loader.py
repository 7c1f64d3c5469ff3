# Path: tests/unit/test_config_loader.py
"""
Unit Tests for ConfigLoader

Tests the configuration loading functionality including:
- Environment variable parsing
- Type conversion methods
- Singleton pattern
- Default value handling
"""

import os
from pathlib import Path
from unittest.mock import patch

from lucid_key.config_loader import ConfigLoader


class TestConfigLoaderBasics:
    """Test basic ConfigLoader functionality."""

    def test_singleton_pattern(self, mock_env_vars):
        """ConfigLoader should return same instance."""
        assert ConfigLoader() is ConfigLoader()

    def test_get_returns_value(self, mock_env_vars):
        assert ConfigLoader().get('environment') == 'test'

    def test_get_returns_default_for_missing(self, mock_env_vars):
        assert ConfigLoader().get('nonexistent_key', 'default_value') == 'default_value'

    def test_get_returns_none_for_missing_no_default(self, mock_env_vars):
        assert ConfigLoader().get('nonexistent_key') is None


class TestConfigLoaderDefaults:
    """Test defaults with no environment set."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigLoader()
        assert config.get('require_score_archive') is True
        assert config.get('load_media') is True
        assert config.get('archive_extensions') == ['.zip', '.lk4', '.lk5']
        assert config.get('encoding_fallbacks') == ['utf-8', 'utf-16', 'latin-1']
        assert config.get('output_format') == 'text'
        assert config.get('json_indent') == 2
        assert config.get('log_dir') is None


class TestConfigLoaderTypeConversion:
    """Test type conversion methods."""

    def test_bool_conversion(self, mock_env_vars):
        assert ConfigLoader().get('debug') is True
        assert ConfigLoader().get('log_console') is False

    def test_int_conversion(self, mock_env_vars):
        assert ConfigLoader().get('json_indent') == 4

    def test_invalid_int_uses_default(self):
        with patch.dict(os.environ, {'LUCID_KEY_JSON_INDENT': 'wide'}):
            assert ConfigLoader().get('json_indent') == 2

    def test_list_conversion(self, mock_env_vars):
        assert ConfigLoader().get('archive_extensions') == ['.zip', '.lk4']

    def test_path_conversion(self, temp_dir):
        with patch.dict(os.environ, {'LUCID_KEY_LOG_DIR': str(temp_dir / 'logs')}):
            path = ConfigLoader().get('log_dir')
        assert isinstance(path, Path)
        assert path == temp_dir / 'logs'

    def test_repr(self, mock_env_vars):
        assert 'environment=test' in repr(ConfigLoader())
