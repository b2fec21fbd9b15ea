"""Storage for live PVP matches and the user -> match index."""

import threading

from app.models.match import Match


class MatchStore:
    """
    Authoritative table of matches plus the one-slot-per-user index.

    Pure data access; the lifecycle rules live in MatchCoordinator. ``lock``
    is reentrant so a caller can hold it across several accessor calls and
    make the whole sequence atomic.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._matches: dict[str, Match] = {}
        self._user_matches: dict[str, str] = {}

    def put(self, match: Match) -> None:
        with self.lock:
            self._matches[match.match_id] = match

    def get(self, match_id: str) -> Match | None:
        with self.lock:
            return self._matches.get(match_id)

    def index_user(self, user_id: str, match_id: str) -> None:
        with self.lock:
            self._user_matches[user_id] = match_id

    def unindex_user(self, user_id: str) -> None:
        with self.lock:
            self._user_matches.pop(user_id, None)

    def match_for_user(self, user_id: str) -> Match | None:
        with self.lock:
            match_id = self._user_matches.get(user_id)
            if match_id is None:
                return None
            match = self._matches.get(match_id)
            if match is None:
                # Index outlived its match
                del self._user_matches[user_id]
            return match

    def delete(self, match_id: str) -> Match | None:
        """Remove a match and any index entries still pointing at it."""
        with self.lock:
            match = self._matches.pop(match_id, None)
            if match is None:
                return None
            for player in match.players:
                # The player may have moved on to a newer match already
                if self._user_matches.get(player.user_id) == match_id:
                    del self._user_matches[player.user_id]
            return match

    def all_matches(self) -> list[Match]:
        with self.lock:
            return list(self._matches.values())

    def __len__(self) -> int:
        with self.lock:
            return len(self._matches)
