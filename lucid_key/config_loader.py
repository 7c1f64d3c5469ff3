# Path: lucid_key/config_loader.py
"""
Configuration Loader for lucid_key

Loads configuration from a .env file and environment variables.
Singleton pattern ensures consistent configuration across all components.

Nothing is required: every value has a default, so a key archive can
be loaded without any environment set up.
"""

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================

ENV_PREFIX: str = 'LUCID_KEY_'

# Logging Defaults
DEFAULT_LOG_LEVEL: str = 'INFO'

# Archive Defaults
DEFAULT_ARCHIVE_EXTENSIONS: str = '.zip,.lk4,.lk5'

# XML Defaults
DEFAULT_ENCODING: str = 'utf-8'
DEFAULT_ENCODING_FALLBACKS: str = 'utf-8,utf-16,latin-1'

# Output Defaults
DEFAULT_OUTPUT_FORMAT: str = 'text'
DEFAULT_JSON_INDENT: int = 2


class ConfigLoader:
    """
    Singleton configuration loader for lucid_key.

    Loads configuration from environment variables with type
    conversion and sensible defaults.

    Example:
        config = ConfigLoader()
        extensions = config.get('archive_extensions')  # ['.zip', '.lk4', '.lk5']
        strict = config.get('require_score_archive')   # True
    """

    _instance: Optional['ConfigLoader'] = None
    _initialized: bool = False

    def __new__(cls) -> 'ConfigLoader':
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """
        Initialize configuration loader.

        Only runs once due to singleton pattern. Loads the .env file from
        the working directory or, failing that, the project root.
        """
        if ConfigLoader._initialized:
            return

        for env_path in self._candidate_env_files():
            if env_path.exists():
                load_dotenv(dotenv_path=env_path, interpolate=True)
                break

        self._config = self._load_configuration()
        ConfigLoader._initialized = True

    @staticmethod
    def _candidate_env_files() -> list[Path]:
        """Locations searched for a .env file, in priority order."""
        # lucid_key/config_loader.py -> project root is one level up
        project_root = Path(__file__).resolve().parent.parent
        return [Path.cwd() / '.env', project_root / '.env']

    def _load_configuration(self) -> dict[str, Any]:
        """
        Load all configuration from environment.

        Returns:
            Dictionary of configuration values with proper types
        """
        config = {
            # ================================================================
            # ENVIRONMENT & DEBUG
            # ================================================================
            'environment': self._get_env('ENVIRONMENT', 'development'),
            'debug': self._get_bool('DEBUG', False),

            # ================================================================
            # LOGGING CONFIGURATION
            # ================================================================
            'log_dir': self._get_path('LOG_DIR'),
            'log_level': self._get_env('LOG_LEVEL', DEFAULT_LOG_LEVEL),
            'log_console': self._get_bool('LOG_CONSOLE', True),

            # ================================================================
            # ARCHIVE CONFIGURATION
            # ================================================================
            'archive_extensions': self._get_list(
                'ARCHIVE_EXTENSIONS', DEFAULT_ARCHIVE_EXTENSIONS
            ),
            'require_score_archive': self._get_bool('REQUIRE_SCORE_ARCHIVE', True),
            'load_media': self._get_bool('LOAD_MEDIA', True),

            # ================================================================
            # XML CONFIGURATION
            # ================================================================
            'disable_external_entities': self._get_bool(
                'DISABLE_EXTERNAL_ENTITIES', True
            ),
            'default_encoding': self._get_env('DEFAULT_ENCODING', DEFAULT_ENCODING),
            'encoding_fallbacks': self._get_list(
                'ENCODING_FALLBACKS', DEFAULT_ENCODING_FALLBACKS
            ),

            # ================================================================
            # OUTPUT CONFIGURATION
            # ================================================================
            'output_format': self._get_env('OUTPUT_FORMAT', DEFAULT_OUTPUT_FORMAT),
            'json_indent': self._get_int('JSON_INDENT', DEFAULT_JSON_INDENT),
        }

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return self._config.get(key, default)

    def _get_path(self, key: str, required: bool = False) -> Optional[Path]:
        """
        Get path from environment variable.

        Args:
            key: Variable name without the LUCID_KEY_ prefix
            required: If True, raise error when missing

        Returns:
            Path object or None

        Raises:
            ValueError: If required and missing
        """
        value = os.getenv(ENV_PREFIX + key)

        if value is None or value == '':
            if required:
                raise ValueError(f"Required path not configured: {ENV_PREFIX + key}")
            return None

        # Handle variable interpolation
        if '${' in value:
            value = os.path.expandvars(value)

        return Path(value)

    def _get_env(self, key: str, default: str = '') -> str:
        """Get string environment variable."""
        return os.getenv(ENV_PREFIX + key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable."""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable."""
        value = os.getenv(ENV_PREFIX + key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def _get_list(self, key: str, default: str) -> list[str]:
        """Get comma-separated environment variable as a list of strings."""
        value = os.getenv(ENV_PREFIX + key, default)
        return [item.strip() for item in value.split(',') if item.strip()]

    def __repr__(self) -> str:
        """String representation showing the main settings."""
        return (
            f"ConfigLoader("
            f"environment={self._config.get('environment')}, "
            f"require_score_archive={self._config.get('require_score_archive')})"
        )


__all__ = ['ConfigLoader']
