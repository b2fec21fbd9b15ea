import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import ContainerDep, get_coordinator
from app.api.v1.endpoints.auth import get_current_user
from app.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from app.models.match import Match
from app.schemas.match import (
    CreateMatchRequest,
    DummyPlayerJoinRequest,
    JoinMatchRequest,
    MatchEnvelope,
    MatchResponse,
)
from app.schemas.user import SessionUser
from app.services.match_coordinator import MatchCoordinator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["pvp"])

CurrentUser = Annotated[SessionUser, Depends(get_current_user)]
Coordinator = Annotated[MatchCoordinator, Depends(get_coordinator)]


def _envelope(match: Match, message: str | None = None) -> MatchEnvelope:
    return MatchEnvelope(match=MatchResponse.model_validate(match), message=message)


@router.post("/create", response_model=MatchEnvelope)
async def create_match(
    data: CreateMatchRequest,
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> MatchEnvelope:
    """Open a new match; share the returned match_id with the opponent."""
    if coordinator.get_active_user_match(current_user.user_id) is not None:
        raise ConflictError("You already have an active match")

    match = coordinator.create_match(data.username, current_user.user_id)
    return _envelope(match)


@router.post("/join", response_model=MatchEnvelope)
async def join_match(
    data: JoinMatchRequest,
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> MatchEnvelope:
    """Take the second seat of a waiting match."""
    active = coordinator.get_active_user_match(current_user.user_id)
    if active is not None and active.match_id != data.match_id:
        raise ConflictError("You already have an active match")

    match = coordinator.join_match(data.match_id, data.username, current_user.user_id)
    if match is None:
        raise NotFoundError("Match not found", resource="match")
    return _envelope(match)


@router.get("/my-match", response_model=MatchEnvelope)
async def get_my_match(
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> MatchEnvelope:
    match = coordinator.get_user_match(current_user.user_id)
    if match is None:
        raise NotFoundError("No active match found", resource="match")
    return _envelope(match)


@router.delete("/my-match", status_code=status.HTTP_204_NO_CONTENT)
async def leave_my_match(
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> Response:
    """Leave (and discard) the caller's current match."""
    match = coordinator.get_user_match(current_user.user_id)
    if match is None:
        raise NotFoundError("No active match found", resource="match")
    coordinator.delete_match(match.match_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/match/{match_id}", response_model=MatchEnvelope)
async def get_match(
    match_id: str,
    coordinator: Coordinator,
) -> MatchEnvelope:
    """Public match status, polled by both players."""
    match = coordinator.get_match(match_id)
    if match is None:
        raise NotFoundError("Match not found", resource="match")
    return _envelope(match)


@router.delete("/match/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_match(
    match_id: str,
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> Response:
    match = coordinator.get_match(match_id)
    if match is None:
        raise NotFoundError("Match not found", resource="match")
    if not match.has_player(current_user.user_id):
        raise AuthorizationError("Not your match")
    coordinator.delete_match(match_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/ready/{match_id}", response_model=MatchEnvelope)
async def set_ready(
    match_id: str,
    current_user: CurrentUser,
    coordinator: Coordinator,
) -> MatchEnvelope:
    """
    Mark the caller ready.

    When both players are ready the comparison starts in the background and
    the match comes back as in_progress; poll /match/{match_id} for the result.
    """
    match = coordinator.set_ready(match_id, current_user.user_id)
    if match is None:
        raise NotFoundError(
            "Match not found or you are not a player in this match", resource="match"
        )
    return _envelope(match)


@router.post("/test-join/{match_id}", response_model=MatchEnvelope, include_in_schema=False)
async def join_dummy_player(
    match_id: str,
    data: DummyPlayerJoinRequest,
    container: ContainerDep,
) -> MatchEnvelope:
    """Seat a synthetic second player and mark it ready (development only)."""
    if not container.settings.PVP_ENABLE_TEST_ENDPOINTS:
        raise NotFoundError("Not found")

    coordinator = container.coordinator
    dummy_user_id = f"test-{uuid.uuid4().hex[:12]}"
    match = coordinator.join_match(match_id, data.username, dummy_user_id)
    if match is None:
        raise NotFoundError("Match not found", resource="match")

    match = coordinator.set_ready(match_id, dummy_user_id)
    logger.info("Test player %s joined match %s", data.username, match_id)
    return _envelope(match, message="Test player joined and marked ready")
