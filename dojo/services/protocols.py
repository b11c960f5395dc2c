"""
Service protocol definitions (interfaces).

Defines the capabilities injected into the session controller using
Python's typing.Protocol, so tests and alternative backends can provide
any object with the right shape.
"""

from typing import List, Protocol, Sequence

from dojo.domain.models.leaderboard import LeaderboardEntry


class ITeacherOracle(Protocol):
    """
    Protocol for the teacher text-generation service.
    """

    async def send(self, prompt: str) -> str:
        """
        Get the teacher's reply to a prompt.

        Args:
            prompt: Text forwarded to the teacher

        Returns:
            Raw reply text, possibly containing grading markers

        Raises:
            OracleFailure: On any transport or provider error
        """
        ...

    def reset(self) -> None:
        """Drop any conversation context carried between prompts."""
        ...


class ILeaderboardStore(Protocol):
    """
    Protocol for leaderboard persistence.
    """

    async def load_leaderboard(self) -> List[LeaderboardEntry]:
        """
        Load the stored leaderboard.

        Returns:
            Ranked entries; empty when nothing is stored or data is corrupt
        """
        ...

    async def save_leaderboard(self, entries: Sequence[LeaderboardEntry]) -> None:
        """
        Replace the stored leaderboard.

        Args:
            entries: Full ranked leaderboard
        """
        ...
