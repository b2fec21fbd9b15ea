"""Wiring of the long-lived service objects shared by all requests."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from app.config import Settings
from app.core.cache import GitHubCache, RoastCache
from app.core.rate_limiter import RateLimiter
from app.core.tasks import TaskRunner
from app.services.comparison_service import ComparisonJob, ComparisonService
from app.services.github_service import GitHubService
from app.services.janitor import MatchJanitor
from app.services.leaderboard_service import LeaderboardService
from app.services.llm_service import LLMService
from app.services.match_coordinator import MatchCoordinator
from app.services.match_store import MatchStore
from app.services.tts_service import TTSService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    github_service: GitHubService
    llm_service: LLMService
    tts_service: TTSService
    github_cache: GitHubCache
    roast_cache: RoastCache
    leaderboard: LeaderboardService
    comparison_service: ComparisonService
    match_store: MatchStore
    coordinator: MatchCoordinator
    comparison_job: ComparisonJob
    task_runner: TaskRunner
    janitor: MatchJanitor
    rate_limiter: RateLimiter

    async def startup(self) -> None:
        self.task_runner.bind(asyncio.get_running_loop())
        self.janitor.start()

    async def shutdown(self) -> None:
        await self.janitor.stop()
        await self.task_runner.shutdown()
        await self.github_service.aclose()
        await self.tts_service.aclose()
        await self.llm_service.aclose()
        logger.info("Services shut down")


def build_container(
    settings: Settings,
    github_service: GitHubService | None = None,
    llm_service: LLMService | None = None,
    tts_service: TTSService | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ServiceContainer:
    """Construct every service once; collaborators can be swapped for tests."""
    github_service = github_service or GitHubService(token=settings.github_token)
    llm_service = llm_service or LLMService(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        base_url=settings.OPENAI_BASE_URL,
    )
    tts_service = tts_service or TTSService(
        api_key=settings.ELEVENLABS_API_KEY,
        default_model=settings.ELEVENLABS_DEFAULT_MODEL,
    )

    github_cache = GitHubCache(settings.GITHUB_CACHE_TTL_SECONDS)
    roast_cache = RoastCache(settings.ROAST_CACHE_TTL_SECONDS)
    leaderboard = LeaderboardService()
    comparison_service = ComparisonService(
        github_service, llm_service, github_cache, roast_cache, leaderboard
    )

    match_store = MatchStore()
    coordinator = (
        MatchCoordinator(match_store, clock=clock) if clock else MatchCoordinator(match_store)
    )
    task_runner = TaskRunner()
    comparison_job = ComparisonJob(
        coordinator,
        comparison_service,
        task_runner,
        language=settings.PVP_LANGUAGE,
        max_repos=settings.PVP_MAX_REPOS,
        intensity=settings.PVP_INTENSITY,
    )
    coordinator.on_match_started = comparison_job.schedule

    janitor = MatchJanitor(
        coordinator,
        retention=timedelta(seconds=settings.PVP_RETENTION_SECONDS),
        interval_seconds=settings.PVP_CLEANUP_INTERVAL_SECONDS,
        clock=clock,
    )
    rate_limiter = RateLimiter(settings.RATE_LIMIT_REQUESTS, settings.RATE_LIMIT_WINDOW_SECONDS)

    return ServiceContainer(
        settings=settings,
        github_service=github_service,
        llm_service=llm_service,
        tts_service=tts_service,
        github_cache=github_cache,
        roast_cache=roast_cache,
        leaderboard=leaderboard,
        comparison_service=comparison_service,
        match_store=match_store,
        coordinator=coordinator,
        comparison_job=comparison_job,
        task_runner=task_runner,
        janitor=janitor,
        rate_limiter=rate_limiter,
    )
