"""Pytest configuration and shared fixtures."""

import pytest

from careerwatch.utils.logging import reset_logging


@pytest.fixture
def sample_career_url() -> str:
    """Sample career page URL for testing."""
    return "https://example.com/careers"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep the application logger from leaking handlers between tests."""
    yield
    reset_logging()


@pytest.fixture
async def repository(tmp_path):
    """An initialized repository backed by a temporary database."""
    from careerwatch.store.repository import WatchRepository

    repo = WatchRepository(tmp_path / "careerwatch.db")
    await repo.initialize()
    yield repo
    await repo.close()
