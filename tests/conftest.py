import pytest
import os
import sys
import random
from unittest.mock import patch
from datetime import datetime, timedelta

# Add project root to Python Path so modules can be imported
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lifetunes.adapters.repositories.store import AppRepository, InMemoryStore
from lifetunes.core.models import Coordinate

# ============================================================================
# 1. GLOBAL MOCKS (ENV VARS)
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env_vars(tmp_path):
    """Sets up an isolated environment for all tests."""
    with patch.dict(os.environ, {
        "LIFETUNES_STORE": "memory",
        "LIFETUNES_STORE_PATH": str(tmp_path / "state.json"),
        "LIFETUNES_LOG_DIR": str(tmp_path / "logs"),
        "MONGODB_URI": "mongodb://fake-host:27017",
    }):
        yield

# ============================================================================
# 2. CLOCK & RANDOMNESS
# ============================================================================

class FakeClock:
    """Callable clock returning a controllable instant."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock frozen at 2025-01-15 12:00."""
    return FakeClock(datetime(2025, 1, 15, 12, 0))


@pytest.fixture
def rng():
    """Seeded random source for deterministic shuffles and samples."""
    return random.Random(42)

# ============================================================================
# 3. PERSISTENCE
# ============================================================================

@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return AppRepository(store)

# ============================================================================
# 4. CONTEXT DATA FIXTURES
# ============================================================================

@pytest.fixture
def san_francisco():
    return Coordinate(37.7749, -122.4194)


@pytest.fixture
def oakland():
    """About 13 km from san_francisco."""
    return Coordinate(37.8044, -122.2712)
