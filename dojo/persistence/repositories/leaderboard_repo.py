"""Leaderboard repository: the ranked list stored as one JSON value."""

from typing import List, Sequence

import aiosqlite

import structlog

from dojo.core.exceptions import LeaderboardCorruptionError, PersistenceError
from dojo.domain.models.leaderboard import (
    LeaderboardEntry,
    decode_leaderboard,
    encode_leaderboard,
)
from dojo.persistence.repositories.kv_repo import KeyValueRepository

log = structlog.get_logger(__name__)

LEADERBOARD_KEY = "leaderboard"


class LeaderboardRepository:
    """Loads and saves the whole leaderboard under a single key.

    Missing or corrupt data loads as an empty leaderboard; corruption is
    logged, never raised.
    """

    def __init__(self, db_path: str, key: str = LEADERBOARD_KEY):
        self.kv = KeyValueRepository(db_path)
        self.key = key

    async def load_leaderboard(self) -> List[LeaderboardEntry]:
        raw = await self.kv.get(self.key)
        if raw is None:
            return []

        try:
            entries = decode_leaderboard(raw)
        except LeaderboardCorruptionError as e:
            log.warning("leaderboard_corrupt", key=self.key, error=e.message)
            return []

        log.debug("leaderboard_loaded", key=self.key, entries=len(entries))
        return entries

    async def save_leaderboard(self, entries: Sequence[LeaderboardEntry]) -> None:
        """Replace the stored leaderboard.

        Raises:
            PersistenceError: If the database write fails
        """
        try:
            await self.kv.put(self.key, encode_leaderboard(entries))
        except aiosqlite.Error as e:
            log.error("leaderboard_save_failed", key=self.key, error=str(e))
            raise PersistenceError(f"Could not save leaderboard: {e}") from e

        log.info("leaderboard_saved", key=self.key, entries=len(entries))
