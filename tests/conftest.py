# Path: tests/conftest.py
"""
Pytest Configuration and Shared Fixtures for lucid_key

Provides common test fixtures used across all test modules.
"""

import os
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

# Make the fixtures package importable from every test module
TESTS_ROOT = Path(__file__).parent
sys.path.insert(0, str(TESTS_ROOT))

from fixtures.sample_key import build_key_archive  # noqa: E402


# ==============================================================================
# ENVIRONMENT FIXTURES
# ==============================================================================

@pytest.fixture
def mock_env_vars():
    """Provide mock environment variables for testing."""
    env_vars = {
        'LUCID_KEY_ENVIRONMENT': 'test',
        'LUCID_KEY_DEBUG': 'true',
        'LUCID_KEY_LOG_LEVEL': 'DEBUG',
        'LUCID_KEY_LOG_CONSOLE': 'false',
        'LUCID_KEY_ARCHIVE_EXTENSIONS': '.zip,.lk4',
        'LUCID_KEY_JSON_INDENT': '4',
    }

    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def lenient_scores_env():
    """Environment that downgrades a missing .sco archive to a warning."""
    with patch.dict(os.environ, {'LUCID_KEY_REQUIRE_SCORE_ARCHIVE': 'false'}, clear=False):
        yield


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# KEY ARCHIVE FIXTURES
# ==============================================================================

@pytest.fixture
def sample_archive() -> bytes:
    """Complete sample key archive bytes."""
    return build_key_archive()


@pytest.fixture
def sample_archive_file(temp_dir, sample_archive) -> Path:
    """Sample key archive written to disk as oaks.lk4."""
    path = temp_dir / 'oaks.lk4'
    path.write_bytes(sample_archive)
    return path


@pytest.fixture
def sample_key(sample_archive):
    """Loaded sample key; media handles are released afterwards."""
    from lucid_key import load_archive

    key = load_archive(sample_archive, 'oaks.lk4')
    yield key
    key.release()


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture
def capture_logs():
    """Capture log output for testing."""
    import logging
    from io import StringIO

    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    previous_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    yield log_capture

    root_logger.removeHandler(handler)
    root_logger.setLevel(previous_level)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the ConfigLoader singleton around every test."""
    from lucid_key.config_loader import ConfigLoader

    ConfigLoader._instance = None
    ConfigLoader._initialized = False

    yield

    ConfigLoader._instance = None
    ConfigLoader._initialized = False
