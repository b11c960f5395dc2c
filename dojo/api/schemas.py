"""
API request/response schemas.

Pydantic models for API validation and serialization.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from dojo.domain.models.message import Message
from dojo.domain.models.session import Cue, SessionMode
from dojo.services.session_controller import SessionController


# ============ SESSION SCHEMAS ============


class LoginRequest(BaseModel):
    """Request to log in."""

    identifier: str = Field(..., max_length=64, description="Trainee name")


class CommandRequest(BaseModel):
    """Free text or reserved token from the trainee."""

    text: str = Field(..., min_length=1, max_length=5000, description="Trainee input")


class QuickActionSchema(BaseModel):
    label: str
    token: str


class MessageSchema(BaseModel):
    """Message in the session history."""

    id: str
    role: str
    body: str
    created_at: datetime
    quick_actions: List[QuickActionSchema] = Field(default_factory=list)

    @classmethod
    def from_message(cls, message: Message) -> "MessageSchema":
        return cls(
            id=message.id,
            role=message.role.value,
            body=message.body,
            created_at=message.created_at,
            quick_actions=[
                QuickActionSchema(label=a.label, token=a.token)
                for a in message.quick_actions
            ],
        )


class SessionStateResponse(BaseModel):
    """Everything the presentation layer renders."""

    identifier: Optional[str] = None
    mode: SessionMode
    lives: float
    score: int
    busy: bool
    game_over: bool
    last_cue: Optional[Cue] = None
    history: List[MessageSchema] = Field(default_factory=list)

    @classmethod
    def from_controller(cls, controller: SessionController) -> "SessionStateResponse":
        return cls(
            identifier=controller.identifier,
            mode=controller.mode,
            lives=controller.lives,
            score=controller.score,
            busy=controller.busy,
            game_over=controller.is_game_over,
            last_cue=controller.last_cue,
            history=[MessageSchema.from_message(m) for m in controller.history],
        )


# ============ LEADERBOARD SCHEMAS ============


class LeaderboardEntrySchema(BaseModel):
    rank: int
    name: str
    score: int


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntrySchema]
    total: int
