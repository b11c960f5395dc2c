"""Tests for the SQLite-backed leaderboard repository."""

from unittest.mock import AsyncMock, patch

import aiosqlite
import pytest

from dojo.core.exceptions import PersistenceError
from dojo.domain.models.leaderboard import LeaderboardEntry
from dojo.persistence.repositories.kv_repo import KeyValueRepository
from dojo.persistence.repositories.leaderboard_repo import LEADERBOARD_KEY


@pytest.mark.asyncio
async def test_missing_leaderboard_loads_empty(leaderboard_repo):
    assert await leaderboard_repo.load_leaderboard() == []


@pytest.mark.asyncio
async def test_save_then_load_round_trip(leaderboard_repo):
    board = [
        LeaderboardEntry(name="Ada", score=300),
        LeaderboardEntry(name="Grace", score=300),
        LeaderboardEntry(name="Linus", score=100),
    ]

    await leaderboard_repo.save_leaderboard(board)

    assert await leaderboard_repo.load_leaderboard() == board


@pytest.mark.asyncio
async def test_save_replaces_whole_leaderboard(leaderboard_repo):
    await leaderboard_repo.save_leaderboard([LeaderboardEntry(name="Old", score=10)])
    await leaderboard_repo.save_leaderboard([LeaderboardEntry(name="New", score=20)])

    assert await leaderboard_repo.load_leaderboard() == [
        LeaderboardEntry(name="New", score=20)
    ]


@pytest.mark.asyncio
async def test_corrupt_data_loads_empty(test_db, leaderboard_repo):
    await KeyValueRepository(str(test_db)).put(LEADERBOARD_KEY, "{definitely not a list")

    assert await leaderboard_repo.load_leaderboard() == []


@pytest.mark.asyncio
async def test_save_failure_raises_persistence_error(leaderboard_repo):
    with patch.object(
        leaderboard_repo.kv,
        "put",
        AsyncMock(side_effect=aiosqlite.OperationalError("database is locked")),
    ):
        with pytest.raises(PersistenceError):
            await leaderboard_repo.save_leaderboard([])


class TestKeyValueRepository:
    """Tests for the underlying key-value table."""

    @pytest.mark.asyncio
    async def test_get_missing_key(self, test_db):
        repo = KeyValueRepository(str(test_db))
        assert await repo.get("nope") is None

    @pytest.mark.asyncio
    async def test_put_overwrites(self, test_db):
        repo = KeyValueRepository(str(test_db))
        await repo.put("k", "one")
        await repo.put("k", "two")

        assert await repo.get("k") == "two"

    @pytest.mark.asyncio
    async def test_delete(self, test_db):
        repo = KeyValueRepository(str(test_db))
        await repo.put("k", "v")

        assert await repo.delete("k") is True
        assert await repo.delete("k") is False
        assert await repo.get("k") is None
