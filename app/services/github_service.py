"""GitHub REST client: profile signals and the OAuth web flow."""

import asyncio
import logging
from typing import Any

import httpx

from app.core.exceptions import (
    AuthenticationError,
    ErrorCode,
    NotFoundError,
    UpstreamServiceError,
)
from app.schemas.github import GitHubSignals, ProfileSummary, RepoSummary

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
GITHUB_RAW_BASE = "https://raw.githubusercontent.com"
GITHUB_OAUTH_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_OAUTH_TOKEN_URL = "https://github.com/login/oauth/access_token"
USER_AGENT = "GitGud-Backend/1.0"

README_FILENAMES = ("README.md", "readme.md", "Readme.md")
README_SNIPPET_LENGTH = 2000


class GitHubService:
    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ):
        self.token = token
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, authenticated: bool = True) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if authenticated and self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{GITHUB_API_BASE}{endpoint}"
        try:
            response = await self._client.get(url, params=params, headers=self._headers())

            if response.status_code == 401 and self.token:
                # Bad token: fall back to anonymous requests with lower rate limits
                logger.warning("GitHub rejected the configured token, retrying anonymously")
                response = await self._client.get(
                    url, params=params, headers=self._headers(authenticated=False)
                )
                if response.status_code == 401:
                    raise UpstreamServiceError(
                        "GitHub API authentication failed. Check GITHUB_TOKEN or remove it "
                        "to use unauthenticated requests.",
                        code=ErrorCode.GITHUB_ERROR,
                    )
        except httpx.RequestError as e:
            logger.warning("Network error calling GitHub %s: %s", endpoint, e)
            raise UpstreamServiceError(
                f"Network error connecting to GitHub API: {e}",
                code=ErrorCode.GITHUB_ERROR,
            ) from e

        if response.status_code == 401:
            raise UpstreamServiceError(
                "GitHub API authentication failed", code=ErrorCode.GITHUB_ERROR
            )
        if response.status_code == 404:
            raise NotFoundError("GitHub user not found", resource="github_user")
        if response.status_code == 403:
            raise UpstreamServiceError(
                "GitHub API rate limit exceeded. Consider setting a valid GITHUB_TOKEN.",
                code=ErrorCode.GITHUB_ERROR,
            )
        if response.is_error:
            raise UpstreamServiceError(
                f"GitHub API error: {response.status_code} {response.reason_phrase}",
                code=ErrorCode.GITHUB_ERROR,
            )
        return response.json()

    async def get_user_profile(self, username: str) -> dict[str, Any]:
        return await self._get_json(f"/users/{username}")

    async def get_user_repos(self, username: str, per_page: int = 100) -> list[dict[str, Any]]:
        return await self._get_json(
            f"/users/{username}/repos",
            params={"per_page": per_page, "sort": "updated", "direction": "desc"},
        )

    async def get_repo_readme(self, owner: str, repo: str, branch: str = "main") -> str | None:
        """First part of the repository README, or None. Never raises."""
        for filename in README_FILENAMES:
            try:
                response = await self._client.get(
                    f"{GITHUB_RAW_BASE}/{owner}/{repo}/{branch}/{filename}",
                    headers={"Accept": "text/plain", "User-Agent": USER_AGENT},
                )
            except httpx.RequestError:
                continue
            if response.status_code == 200:
                return response.text[:README_SNIPPET_LENGTH]
        return None

    async def get_signals(
        self,
        username: str,
        max_repos: int = 5,
        include_readme: bool = False,
    ) -> GitHubSignals:
        """
        Summarize a GitHub account for the LLM.

        Args:
            username: GitHub login
            max_repos: How many repositories to keep, most-starred first
            include_readme: Attach a README snippet to each kept repository

        Returns:
            GitHubSignals with the profile summary and top repositories
        """
        profile, repos = await asyncio.gather(
            self.get_user_profile(username),
            self.get_user_repos(username),
        )

        top_repos = sorted(repos, key=lambda r: r.get("stargazers_count", 0), reverse=True)
        top_repos = top_repos[:max_repos]

        readmes: list[str | None] = [None] * len(top_repos)
        if include_readme:
            readmes = await asyncio.gather(*(
                self.get_repo_readme(
                    repo["full_name"].split("/")[0],
                    repo["name"],
                    repo.get("default_branch") or "main",
                )
                for repo in top_repos
            ))

        return GitHubSignals(
            profile=ProfileSummary(
                public_repos=profile.get("public_repos", 0),
                followers=profile.get("followers", 0),
                created_at=profile.get("created_at", ""),
                bio=profile.get("bio"),
                location=profile.get("location"),
                company=profile.get("company"),
            ),
            top_repos=[
                RepoSummary(
                    name=repo["name"],
                    language=repo.get("language"),
                    stars=repo.get("stargazers_count", 0),
                    forks=repo.get("forks_count", 0),
                    updated_at=repo.get("updated_at", ""),
                    description=repo.get("description"),
                    readme_snippet=readme or None,
                )
                for repo, readme in zip(top_repos, readmes)
            ],
        )

    # OAuth web flow

    async def exchange_oauth_code(
        self,
        client_id: str,
        client_secret: str,
        code: str,
        redirect_uri: str,
    ) -> str:
        """Trade an authorization code for a user access token."""
        try:
            response = await self._client.post(
                GITHUB_OAUTH_TOKEN_URL,
                data={
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            )
        except httpx.RequestError as e:
            raise UpstreamServiceError(
                f"Network error during GitHub sign-in: {e}", code=ErrorCode.GITHUB_ERROR
            ) from e

        payload = response.json() if response.is_success else {}
        access_token = payload.get("access_token")
        if not access_token:
            reason = payload.get("error_description") or payload.get("error") or response.status_code
            raise AuthenticationError(
                f"GitHub sign-in failed: {reason}", code=ErrorCode.AUTH_OAUTH_FAILED
            )
        return access_token

    async def get_authenticated_user(self, access_token: str) -> dict[str, Any]:
        try:
            response = await self._client.get(
                f"{GITHUB_API_BASE}/user",
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github.v3+json",
                    "User-Agent": USER_AGENT,
                },
            )
        except httpx.RequestError as e:
            raise UpstreamServiceError(
                f"Network error during GitHub sign-in: {e}", code=ErrorCode.GITHUB_ERROR
            ) from e

        if not response.is_success:
            raise AuthenticationError(
                "Failed to fetch user from GitHub", code=ErrorCode.AUTH_OAUTH_FAILED
            )
        return response.json()
