"""Leaderboard domain models and ranking.

The leaderboard is a list of entries sorted by descending score. Ties keep
insertion order: Python's sort is stable, including with ``reverse=True``,
so no secondary key is needed.
"""

import json
from typing import List, Sequence

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dojo.core.exceptions import LeaderboardCorruptionError


class LeaderboardEntry(BaseModel):
    """Final score of one game-over episode."""

    name: str
    score: int = Field(ge=0)


_entries_adapter = TypeAdapter(List[LeaderboardEntry])


def rank_entries(entries: Sequence[LeaderboardEntry], limit: int) -> List[LeaderboardEntry]:
    """Sort entries by descending score and keep the top ``limit``."""
    return sorted(entries, key=lambda entry: entry.score, reverse=True)[:limit]


def merge_entry(
    leaderboard: Sequence[LeaderboardEntry],
    entry: LeaderboardEntry,
    limit: int,
) -> List[LeaderboardEntry]:
    """Insert a new entry after the existing ones and re-rank.

    The new entry goes last before sorting, so it ranks below existing
    entries with the same score.
    """
    return rank_entries([*leaderboard, entry], limit)


def encode_leaderboard(entries: Sequence[LeaderboardEntry]) -> str:
    """Serialize a leaderboard to a JSON array string."""
    return json.dumps([entry.model_dump() for entry in entries])


def decode_leaderboard(raw: str) -> List[LeaderboardEntry]:
    """Parse a stored leaderboard.

    Raises:
        LeaderboardCorruptionError: If the payload is not a JSON array of
            valid entries
    """
    try:
        return _entries_adapter.validate_json(raw)
    except PydanticValidationError as e:
        raise LeaderboardCorruptionError(
            f"Stored leaderboard is malformed: {e.error_count()} error(s)"
        ) from e
