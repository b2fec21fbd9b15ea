from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.match import MatchStatus
from app.schemas.compare import CompareResponse


class CreateMatchRequest(BaseModel):
    """GitHub username the creator wants to compete with"""

    username: str = Field(..., min_length=1, max_length=39)


class JoinMatchRequest(BaseModel):
    match_id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=39)


class DummyPlayerJoinRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=39)


class PlayerResponse(BaseModel):
    username: str
    user_id: str
    ready: bool

    model_config = ConfigDict(from_attributes=True)


class MatchResponse(BaseModel):
    """Match state as seen by polling clients"""

    match_id: str
    player1: PlayerResponse | None
    player2: PlayerResponse | None
    status: MatchStatus
    result: CompareResponse | None = None
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MatchEnvelope(BaseModel):
    match: MatchResponse
    message: str | None = None
