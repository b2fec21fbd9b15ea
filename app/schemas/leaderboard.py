from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    username: str
    wins: int
    losses: int
    win_rate: float  # percentage, two decimals
    total_matches: int
    last_match: str


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntry]
    total_entries: int
