"""Session domain models for the training game loop.

This module defines the mutable aggregate that the session controller owns
for the lifetime of the process.

Core Models:
    - SessionMode: MENU or TRAINING
    - EpisodeState: ACTIVE or HALTED (game over committed)
    - Session: lives/score economy, transcript and lifecycle flags

Episode Lifecycle:
    1. login()/restart() start an ACTIVE episode with full lives
    2. Fail grades and hint charges drain lives
    3. The first observation of lives <= 0 takes the ACTIVE -> HALTED edge
       and commits the leaderboard entry
    4. HALTED is left only through restart()
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from dojo.domain.models.message import Message


class SessionMode(str, Enum):
    """Which screen the trainee is on."""

    MENU = "menu"
    TRAINING = "training"


class EpisodeState(str, Enum):
    """Game-over state machine.

    ACTIVE -> HALTED is taken exactly once per episode; only a restart
    returns to ACTIVE.
    """

    ACTIVE = "active"
    HALTED = "halted"


class Cue(str, Enum):
    """Feedback signal for the presentation layer to play or flash."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class Session(BaseModel):
    """Mutable game state for the single trainee of this process.

    Attributes:
        - identifier: Name chosen at login (None before login)
        - mode: Current screen
        - lives: Remaining lives, clamped to [0, max_lives]
        - score: Accumulated score, never negative
        - busy: True exactly while an oracle request is outstanding
        - history: Ordered transcript
        - episode: Game-over state machine
        - generation: Bumped on every reset so late oracle replies can be
          recognised and dropped
    """

    identifier: Optional[str] = None
    mode: SessionMode = SessionMode.MENU
    lives: float = 3.0
    score: int = 0
    busy: bool = False
    history: List[Message] = Field(default_factory=list)
    episode: EpisodeState = EpisodeState.ACTIVE
    generation: int = 0

    @property
    def logged_in(self) -> bool:
        return self.identifier is not None

    @property
    def is_game_over(self) -> bool:
        return self.lives <= 0

    @property
    def game_over_recorded(self) -> bool:
        return self.episode is EpisodeState.HALTED
