"""Win/loss leaderboard kept in process memory."""

import threading
from datetime import datetime, timezone

from app.models.leaderboard import LeaderboardRecord
from app.schemas.leaderboard import LeaderboardEntry


def _to_entry(record: LeaderboardRecord) -> LeaderboardEntry:
    return LeaderboardEntry(
        username=record.username,
        wins=record.wins,
        losses=record.losses,
        win_rate=record.win_rate,
        total_matches=record.total_matches,
        last_match=record.last_match,
    )


class LeaderboardService:
    def __init__(self) -> None:
        self._records: dict[str, LeaderboardRecord] = {}
        self._lock = threading.Lock()

    def record_match(self, winner: str, loser: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            winner_record = self._records.setdefault(winner, LeaderboardRecord(username=winner))
            winner_record.wins += 1
            winner_record.last_match = now

            loser_record = self._records.setdefault(loser, LeaderboardRecord(username=loser))
            loser_record.losses += 1
            loser_record.last_match = now

    def get_leaderboard(self, limit: int = 50) -> list[LeaderboardEntry]:
        """Entries ranked by win rate, then by number of wins."""
        with self._lock:
            entries = [_to_entry(record) for record in self._records.values()]
        entries.sort(key=lambda e: (e.win_rate, e.wins), reverse=True)
        return entries[:limit]

    def get_user_stats(self, username: str) -> LeaderboardEntry | None:
        with self._lock:
            record = self._records.get(username)
            return _to_entry(record) if record else None
