from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.github import GitHubSignals


class RoastIntensity(str, Enum):
    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"


class DeveloperProfile(BaseModel):
    archetype: str
    strengths: list[str]
    blind_spots: list[str]


class RoastResult(BaseModel):
    """Roast, improvement advice and personality profile produced by the LLM"""

    roast: str = Field(..., min_length=1)
    advice: list[str]
    profile: DeveloperProfile


class RoastRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=39)
    intensity: RoastIntensity = RoastIntensity.MEDIUM
    include_readme: bool = False
    max_repos: int = Field(default=5, ge=1, le=10)


class RoastResponse(BaseModel):
    request_id: str
    username: str
    signals: GitHubSignals
    result: RoastResult
