"""Head-to-head comparisons and the PVP comparison job."""

import asyncio
import logging
import uuid

from app.core.cache import GitHubCache, RoastCache
from app.core.tasks import TaskRunner
from app.models.match import Match
from app.schemas.compare import CompareResponse, UserComparison
from app.schemas.github import GitHubSignals
from app.schemas.roast import RoastIntensity, RoastResult
from app.services.github_service import GitHubService
from app.services.leaderboard_service import LeaderboardService
from app.services.llm_service import LLMService
from app.services.match_coordinator import MatchCoordinator

logger = logging.getLogger(__name__)


class ComparisonService:
    """Fetch-or-compute access to signals and roasts, plus verdicts."""

    def __init__(
        self,
        github_service: GitHubService,
        llm_service: LLMService,
        github_cache: GitHubCache,
        roast_cache: RoastCache,
        leaderboard: LeaderboardService,
    ):
        self.github_service = github_service
        self.llm_service = llm_service
        self.github_cache = github_cache
        self.roast_cache = roast_cache
        self.leaderboard = leaderboard

    async def get_signals(
        self,
        username: str,
        max_repos: int = 5,
        include_readme: bool = False,
    ) -> GitHubSignals:
        signals = self.github_cache.get(username, max_repos, include_readme)
        if signals is None:
            signals = await self.github_service.get_signals(username, max_repos, include_readme)
            self.github_cache.set(username, max_repos, include_readme, signals)
        return signals

    async def get_roast(
        self,
        username: str,
        signals: GitHubSignals,
        intensity: RoastIntensity = RoastIntensity.MEDIUM,
    ) -> RoastResult:
        intensity = RoastIntensity(intensity)
        roast = self.roast_cache.get(username, intensity.value)
        if roast is None:
            roast = await self.llm_service.generate_roast(signals, intensity)
            self.roast_cache.set(username, intensity.value, roast)
        return roast

    async def compare(
        self,
        username1: str,
        username2: str,
        language: str = "en",
        max_repos: int = 5,
        intensity: RoastIntensity = RoastIntensity.MEDIUM,
        request_id: str | None = None,
    ) -> CompareResponse:
        """
        Roast both users and ask the judge for a verdict.

        Signals for the two users are fetched concurrently, then both roasts
        are generated concurrently; the verdict only starts once both roasts
        exist.
        """
        signals1, signals2 = await asyncio.gather(
            self.get_signals(username1, max_repos),
            self.get_signals(username2, max_repos),
        )
        roast1, roast2 = await asyncio.gather(
            self.get_roast(username1, signals1, intensity),
            self.get_roast(username2, signals2, intensity),
        )

        user1 = UserComparison(username=username1, signals=signals1, roast=roast1)
        user2 = UserComparison(username=username2, signals=signals2, roast=roast2)
        verdict = await self.llm_service.compare_users(user1, user2, language)

        return CompareResponse(
            request_id=request_id or str(uuid.uuid4()),
            user1=user1,
            user2=user2,
            verdict=verdict,
        )

    def record_outcome(self, response: CompareResponse) -> None:
        outcome = response.outcome()
        if outcome is not None:
            self.leaderboard.record_match(*outcome)


class ComparisonJob:
    """
    Runs the comparison for a PVP match once both players are ready.

    Scheduled from MatchCoordinator.set_ready and never awaited by the
    request that triggered it. Any failure is logged and the match stays
    ``in_progress``; there is no retry.
    """

    def __init__(
        self,
        coordinator: MatchCoordinator,
        comparison_service: ComparisonService,
        task_runner: TaskRunner,
        language: str = "en",
        max_repos: int = 5,
        intensity: RoastIntensity = RoastIntensity.MEDIUM,
    ):
        self.coordinator = coordinator
        self.comparison_service = comparison_service
        self.task_runner = task_runner
        self.language = language
        self.max_repos = max_repos
        self.intensity = RoastIntensity(intensity)

    def schedule(self, match: Match) -> None:
        self.task_runner.spawn(self.run(match), name=f"pvp-comparison-{match.match_id}")

    async def run(self, match: Match) -> None:
        if match.player1 is None or match.player2 is None:
            logger.error("Match %s started without two players", match.match_id)
            return

        username1 = match.player1.username
        username2 = match.player2.username
        logger.info("Comparing %s vs %s for match %s", username1, username2, match.match_id)

        try:
            result = await self.comparison_service.compare(
                username1,
                username2,
                language=self.language,
                max_repos=self.max_repos,
                intensity=self.intensity,
                request_id=f"pvp-{match.match_id}",
            )
        except Exception:
            logger.exception("PVP match comparison failed (match_id=%s)", match.match_id)
            return

        self.coordinator.set_result(match.match_id, result)
        self.comparison_service.record_outcome(result)
