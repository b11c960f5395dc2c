"""Domain models package."""

from .leaderboard import LeaderboardEntry
from .message import Message, QuickAction, Role
from .session import Cue, EpisodeState, Session, SessionMode

__all__ = [
    "LeaderboardEntry",
    "Message",
    "QuickAction",
    "Role",
    "Cue",
    "EpisodeState",
    "Session",
    "SessionMode",
]
