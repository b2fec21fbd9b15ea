from app.models.leaderboard import LeaderboardRecord
from app.models.match import Match, MatchStatus, Player

__all__ = [
    "Match",
    "MatchStatus",
    "Player",
    "LeaderboardRecord",
]
