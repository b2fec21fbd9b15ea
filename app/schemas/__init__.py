from app.schemas.compare import CompareRequest, CompareResponse, UserComparison, Verdict
from app.schemas.github import GitHubSignals, ProfileSummary, RepoSummary
from app.schemas.leaderboard import LeaderboardEntry, LeaderboardResponse
from app.schemas.match import (
    CreateMatchRequest,
    DummyPlayerJoinRequest,
    JoinMatchRequest,
    MatchEnvelope,
    MatchResponse,
    PlayerResponse,
)
from app.schemas.roast import (
    DeveloperProfile,
    RoastIntensity,
    RoastRequest,
    RoastResponse,
    RoastResult,
)
from app.schemas.translate import TranslateRequest, TranslateResponse
from app.schemas.tts import TTSRequest
from app.schemas.user import SessionResponse, SessionUser, Token, TokenPayload

__all__ = [
    "GitHubSignals",
    "ProfileSummary",
    "RepoSummary",
    "RoastIntensity",
    "RoastRequest",
    "RoastResponse",
    "RoastResult",
    "DeveloperProfile",
    "CompareRequest",
    "CompareResponse",
    "UserComparison",
    "Verdict",
    "CreateMatchRequest",
    "JoinMatchRequest",
    "DummyPlayerJoinRequest",
    "PlayerResponse",
    "MatchResponse",
    "MatchEnvelope",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "TranslateRequest",
    "TranslateResponse",
    "TTSRequest",
    "SessionUser",
    "SessionResponse",
    "Token",
    "TokenPayload",
]
