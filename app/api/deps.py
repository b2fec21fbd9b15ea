from typing import Annotated

from fastapi import Depends, Request

from app.services.comparison_service import ComparisonService
from app.services.container import ServiceContainer
from app.services.leaderboard_service import LeaderboardService
from app.services.llm_service import LLMService
from app.services.match_coordinator import MatchCoordinator
from app.services.tts_service import TTSService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_coordinator(container: ContainerDep) -> MatchCoordinator:
    return container.coordinator


def get_comparison_service(container: ContainerDep) -> ComparisonService:
    return container.comparison_service


def get_leaderboard(container: ContainerDep) -> LeaderboardService:
    return container.leaderboard


def get_llm_service(container: ContainerDep) -> LLMService:
    return container.llm_service


def get_tts_service(container: ContainerDep) -> TTSService:
    return container.tts_service
