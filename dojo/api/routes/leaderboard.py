"""
Leaderboard API routes.
"""

from fastapi import APIRouter

from dojo.api.dependencies import ControllerDep
from dojo.api.schemas import LeaderboardEntrySchema, LeaderboardResponse

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(controller: ControllerDep):
    """Ranked top scores, highest first."""
    entries = [
        LeaderboardEntrySchema(rank=rank, name=entry.name, score=entry.score)
        for rank, entry in enumerate(controller.leaderboard, start=1)
    ]
    return LeaderboardResponse(entries=entries, total=len(entries))
