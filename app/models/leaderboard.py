from dataclasses import dataclass


@dataclass
class LeaderboardRecord:
    """Win/loss tally for one GitHub username"""

    username: str
    wins: int = 0
    losses: int = 0
    last_match: str = ""

    @property
    def total_matches(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return round(self.wins / self.total_matches * 100, 2)
