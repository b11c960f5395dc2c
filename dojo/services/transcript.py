"""
Scripted SYSTEM and TEACHER message builders.

Everything the game says on its own (menus, tables, notices) is built here
so the controller only decides *when* to say it.
"""

from typing import List, Sequence

from dojo.domain.models.leaderboard import LeaderboardEntry
from dojo.domain.models.message import Message, QuickAction, Role
from dojo.domain.models.session import Session

MENU_ACTIONS: List[QuickAction] = [
    QuickAction(label="Start training", token="1"),
    QuickAction(label="Leaderboard", token="2"),
    QuickAction(label="Status", token="3"),
]

BACK_TO_MENU: List[QuickAction] = [QuickAction(label="Back to menu", token="menu")]

MENU_TEXT = (
    "MAIN MENU\n"
    "1. Start training\n"
    "2. Leaderboard\n"
    "3. Status\n"
    "Type 'menu' at any time to come back here."
)


def format_lives(lives: float) -> str:
    """Render lives without a trailing .0 (3 -> '3', 2.5 -> '2.5')."""
    return f"{lives:g}"


def welcome_message(identifier: str) -> Message:
    return Message(
        role=Role.SYSTEM,
        body=f"Welcome to the dojo, {identifier}. Try not to embarrass yourself.\n\n{MENU_TEXT}",
        quick_actions=MENU_ACTIONS,
    )


def menu_message() -> Message:
    return Message(role=Role.SYSTEM, body=MENU_TEXT, quick_actions=MENU_ACTIONS)


def user_message(text: str) -> Message:
    return Message(role=Role.USER, body=text)


def teacher_message(text: str) -> Message:
    return Message(role=Role.TEACHER, body=text, quick_actions=BACK_TO_MENU)


def render_leaderboard(entries: Sequence[LeaderboardEntry]) -> str:
    """Render the ranked table, one line per entry."""
    if not entries:
        return "LEADERBOARD\nNo scores yet."
    width = len(str(len(entries)))
    lines = ["LEADERBOARD"]
    for rank, entry in enumerate(entries, start=1):
        lines.append(f"{rank:>{width}}. {entry.name} - {entry.score}")
    return "\n".join(lines)


def leaderboard_message(entries: Sequence[LeaderboardEntry]) -> Message:
    return Message(
        role=Role.SYSTEM, body=render_leaderboard(entries), quick_actions=MENU_ACTIONS
    )


def status_message(session: Session) -> Message:
    body = (
        "STATUS\n"
        f"Trainee: {session.identifier}\n"
        f"Lives: {format_lives(session.lives)}\n"
        f"Score: {session.score}"
    )
    return Message(role=Role.SYSTEM, body=body, quick_actions=MENU_ACTIONS)


def rejection_message(text: str) -> Message:
    return Message(
        role=Role.SYSTEM,
        body=f"'{text}' is not an option. Pick 1, 2 or 3.",
        quick_actions=MENU_ACTIONS,
    )


def oracle_error_message() -> Message:
    return Message(
        role=Role.SYSTEM,
        body="The instructor could not be reached. Send your message again to retry.",
        quick_actions=BACK_TO_MENU,
    )


def exam_start_message() -> Message:
    return Message(role=Role.SYSTEM, body="EXAM STARTING. No hints will save you now.")


def game_over_message(entries: Sequence[LeaderboardEntry], score: int) -> Message:
    body = (
        f"GAME OVER. Final score: {score}\n\n"
        f"{render_leaderboard(entries)}\n\n"
        "Training suspended. Restart to try again."
    )
    return Message(role=Role.SYSTEM, body=body)
