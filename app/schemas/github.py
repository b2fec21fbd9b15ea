"""Normalized GitHub profile data handed to the LLM."""

from pydantic import BaseModel


class ProfileSummary(BaseModel):
    public_repos: int
    followers: int
    created_at: str
    bio: str | None = None
    location: str | None = None
    company: str | None = None


class RepoSummary(BaseModel):
    name: str
    language: str | None = None
    stars: int
    forks: int
    updated_at: str
    description: str | None = None
    readme_snippet: str | None = None


class GitHubSignals(BaseModel):
    """Profile facts plus the user's most-starred repositories"""

    profile: ProfileSummary
    top_repos: list[RepoSummary]
