"""
Shared test fixtures.

The teacher oracle and leaderboard store are mocked for controller tests;
persistence tests use a real temporary SQLite database.
"""

import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from dojo.core.config import GameConfig
from dojo.persistence.database import init_database
from dojo.persistence.repositories.leaderboard_repo import LeaderboardRepository
from dojo.services.session_controller import SessionController


@pytest.fixture
async def test_db():
    """Create and initialize test database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        await init_database(db_path)
        yield db_path


@pytest.fixture
def leaderboard_repo(test_db):
    """Leaderboard repository on the test database."""
    return LeaderboardRepository(str(test_db))


@pytest.fixture
def mock_oracle():
    """Teacher oracle; tests set send.return_value or send.side_effect."""
    oracle = AsyncMock()
    oracle.send = AsyncMock(return_value="Listen up, maggot. What is a list?")
    oracle.reset = MagicMock()
    return oracle


@pytest.fixture
def mock_store():
    """In-memory leaderboard store."""
    store = AsyncMock()
    store.load_leaderboard = AsyncMock(return_value=[])
    store.save_leaderboard = AsyncMock(return_value=None)
    return store


@pytest.fixture
def cues():
    """Collects emitted cues in order."""
    return []


@pytest.fixture
def controller(mock_oracle, mock_store, cues):
    """Controller with default game balance and mocked collaborators."""
    return SessionController(
        oracle=mock_oracle,
        leaderboard_store=mock_store,
        config=GameConfig(),
        topic="Python",
        cue_listener=cues.append,
    )


@pytest.fixture
def logged_in(controller):
    """Controller with a trainee logged in at the main menu."""
    controller.login("Ada")
    return controller


@pytest.fixture
async def training(logged_in, mock_oracle):
    """Controller in TRAINING with the opening question shown."""
    await logged_in.handle_command("1")
    mock_oracle.send.reset_mock()
    return logged_in
