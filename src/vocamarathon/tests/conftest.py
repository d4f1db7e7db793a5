"""Test configuration."""
import os
import tempfile
from pathlib import Path

import pytest

# Set test environment before any imports
os.environ["ENV"] = "test"
_test_dir = Path(tempfile.mkdtemp(prefix="vocamarathon-test-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_test_dir / 'test.db'}"
os.environ["DATA_DIR"] = str(_test_dir / "data")

# Import after environment setup
from vocamarathon.config import ensure_directories
from vocamarathon.models.base import drop_db, init_db


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Set up a clean database and data directories before each test."""
    ensure_directories()
    drop_db()
    init_db()

    yield

    drop_db()
