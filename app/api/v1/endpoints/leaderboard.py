from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_leaderboard
from app.core.exceptions import NotFoundError
from app.schemas.leaderboard import LeaderboardEntry, LeaderboardResponse
from app.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix="", tags=["leaderboard"])

MAX_LIMIT = 100


@router.get("", response_model=LeaderboardResponse)
async def list_leaderboard(
    leaderboard: Annotated[LeaderboardService, Depends(get_leaderboard)],
    limit: int = Query(50, ge=1),
) -> LeaderboardResponse:
    entries = leaderboard.get_leaderboard(min(limit, MAX_LIMIT))
    return LeaderboardResponse(entries=entries, total_entries=len(entries))


@router.get("/{username}", response_model=LeaderboardEntry)
async def get_user_stats(
    username: str,
    leaderboard: Annotated[LeaderboardService, Depends(get_leaderboard)],
) -> LeaderboardEntry:
    stats = leaderboard.get_user_stats(username)
    if stats is None:
        raise NotFoundError("User not found in leaderboard", resource="leaderboard_entry")
    return stats
