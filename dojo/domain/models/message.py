"""Message domain models for the session transcript.

Messages are the atomic unit of the conversation shown to the trainee.
They are frozen once created; the session history only ever appends them
or replaces the whole list on a clean-slate transition.

Core Concepts:
    - Role attribution: USER, TEACHER (oracle reply) or SYSTEM (game notices)
    - Ordered ids: lexicographic id order equals creation order
    - Quick actions: advisory one-tap inputs offered by the presentation layer
"""

import itertools
import threading
import time
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message.

    Values:
        - USER: Trainee input, echoed verbatim
        - TEACHER: Oracle reply, with grading markers stripped
        - SYSTEM: Scripted notices (menu, errors, game over)
    """

    USER = "user"
    TEACHER = "teacher"
    SYSTEM = "system"


class QuickAction(BaseModel):
    """One-tap input the presentation layer may offer under a message."""

    model_config = ConfigDict(frozen=True)

    label: str
    token: str


_sequence = itertools.count()
_sequence_lock = threading.Lock()


def new_message_id() -> str:
    """Generate an ordering-significant message id.

    Format is ``<13-digit epoch milliseconds>-<6-digit sequence>``, so ids
    sort in creation order and never collide within a process.
    """
    with _sequence_lock:
        seq = next(_sequence) % 1_000_000
        millis = int(time.time() * 1000)
    return f"{millis:013d}-{seq:06d}"


class Message(BaseModel):
    """Single immutable entry in the session history."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id)
    role: Role
    body: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    quick_actions: List[QuickAction] = Field(default_factory=list)
