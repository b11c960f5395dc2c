"""Repository layer for persistent storage."""

from .kv_repo import KeyValueRepository
from .leaderboard_repo import LeaderboardRepository

__all__ = ["KeyValueRepository", "LeaderboardRepository"]
