from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.github import GitHubSignals
from app.schemas.roast import RoastResult


class CompareRequest(BaseModel):
    username1: str = Field(..., min_length=1, max_length=39)
    username2: str = Field(..., min_length=1, max_length=39)
    language: str = Field(default="en", min_length=2, max_length=5)


class Verdict(BaseModel):
    """Head-to-head judgement; winner refers to the user1/user2 slots"""

    winner: Literal["user1", "user2", "tie"]
    reasoning: str = Field(..., min_length=1)
    score_user1: float = Field(..., ge=0, le=100)
    score_user2: float = Field(..., ge=0, le=100)


class UserComparison(BaseModel):
    username: str
    signals: GitHubSignals
    roast: RoastResult


class CompareResponse(BaseModel):
    request_id: str
    user1: UserComparison
    user2: UserComparison
    verdict: Verdict

    def outcome(self) -> tuple[str, str] | None:
        """(winner, loser) usernames, or None for a tie."""
        if self.verdict.winner == "user1":
            return self.user1.username, self.user2.username
        if self.verdict.winner == "user2":
            return self.user2.username, self.user1.username
        return None
