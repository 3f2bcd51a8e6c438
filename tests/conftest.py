"""
Global pytest configuration and shared fixtures.

Provides a temporary SQLite store, a fixed clock and quiet logging so tests
never depend on the wall clock or a shared database file.
"""

import pytest
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from credrank.engine.stores import SQLiteTrustStore
from credrank.engine.utils.config import EngineConfig

FIXED_NOW = datetime(2025, 11, 25, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Engine clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def temp_db():
    """Create a temporary database path for testing."""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def store(temp_db):
    return SQLiteTrustStore(db_path=temp_db)


# Performance optimization: disable logging during tests unless explicitly enabled
@pytest.fixture(autouse=True)
def fast_logging():
    """
    Reduce logging verbosity during tests for better performance.
    """
    import logging
    import bittensor as bt

    # Set higher log level to reduce output during tests
    logging.getLogger().setLevel(logging.WARNING)
    bt.logging.set_debug(False)

    yield

    # Restore normal logging after tests
    logging.getLogger().setLevel(logging.INFO)
