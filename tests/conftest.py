import random
from datetime import datetime

import pytest


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_quest.db")
    return db_path


@pytest.fixture
def now():
    return datetime(2024, 3, 9, 16, 30, 0)


@pytest.fixture
def rng():
    return random.Random(1234)
