"""In-memory PVP match state."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.schemas.compare import CompareResponse


class MatchStatus(str, enum.Enum):
    """Match lifecycle; statuses only ever advance in this order."""

    WAITING = "waiting"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Player:
    username: str  # GitHub login being compared
    user_id: str  # authenticated identity of the player
    ready: bool = False


@dataclass
class Match:
    match_id: str
    player1: Player | None
    created_at: datetime
    player2: Player | None = None
    status: MatchStatus = MatchStatus.WAITING
    result: CompareResponse | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def players(self) -> list[Player]:
        return [p for p in (self.player1, self.player2) if p is not None]

    def player_for(self, user_id: str) -> Player | None:
        for player in self.players:
            if player.user_id == user_id:
                return player
        return None

    def has_player(self, user_id: str) -> bool:
        return self.player_for(user_id) is not None

    @property
    def is_active(self) -> bool:
        return self.status != MatchStatus.COMPLETED

    def snapshot(self) -> Match:
        """Detached copy safe to hand out while the original keeps changing."""
        return copy.deepcopy(self)
