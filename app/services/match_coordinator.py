"""
PVP match lifecycle.

A match moves strictly forward through

    waiting --join--> ready --both players ready--> in_progress --result--> completed

Every read-modify-write runs under the store lock, so concurrent joins
produce exactly one second player and concurrent ready calls start the
comparison exactly once.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from app.core.exceptions import AuthenticationError, CannotJoinOwnMatchError, MatchFullError
from app.models.match import Match, MatchStatus, Player
from app.schemas.compare import CompareResponse
from app.services.match_store import MatchStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_match_id() -> str:
    return str(uuid.uuid4())


class MatchCoordinator:
    """
    Enforces the match state machine on top of a MatchStore.

    ``on_match_started`` is called once per match, outside the lock, with a
    snapshot of the match that just entered ``in_progress``. It must only
    schedule work and return; it is never awaited.

    Holding at most one active match per user is a caller contract: check
    ``get_active_user_match`` before ``create_match``. ``create_match`` itself
    always succeeds.
    """

    def __init__(
        self,
        store: MatchStore,
        on_match_started: Callable[[Match], None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_match_id,
    ):
        self.store = store
        self.on_match_started = on_match_started
        self._clock = clock
        self._id_factory = id_factory

    @staticmethod
    def _require_identity(user_id: str | None) -> str:
        if not user_id:
            raise AuthenticationError()
        return user_id

    def create_match(self, username: str, user_id: str | None) -> Match:
        user_id = self._require_identity(user_id)
        match = Match(
            match_id=self._id_factory(),
            player1=Player(username=username, user_id=user_id),
            created_at=self._clock(),
        )
        with self.store.lock:
            self.store.put(match)
            self.store.index_user(user_id, match.match_id)
            snapshot = match.snapshot()

        logger.info("Match %s created by %s (%s)", match.match_id, user_id, username)
        return snapshot

    def join_match(self, match_id: str, username: str, user_id: str | None) -> Match | None:
        """
        Fill the second slot.

        Returns None for an unknown match; raises CannotJoinOwnMatchError or
        MatchFullError when the match rules refuse the join.
        """
        user_id = self._require_identity(user_id)
        with self.store.lock:
            match = self.store.get(match_id)
            if match is None:
                return None
            if match.player1 is not None and match.player1.user_id == user_id:
                raise CannotJoinOwnMatchError()
            if match.player2 is not None:
                raise MatchFullError()

            match.player2 = Player(username=username, user_id=user_id)
            match.status = MatchStatus.READY
            self.store.index_user(user_id, match_id)
            snapshot = match.snapshot()

        logger.info("Match %s joined by %s (%s)", match_id, user_id, username)
        return snapshot

    def set_ready(self, match_id: str, user_id: str | None) -> Match | None:
        """
        Mark the caller ready.

        Returns None when the match does not exist or the caller is not one of
        its players. When this call makes both players ready the match enters
        ``in_progress`` and ``on_match_started`` fires; repeat calls never
        fire it again.
        """
        user_id = self._require_identity(user_id)
        with self.store.lock:
            match = self.store.get(match_id)
            if match is None:
                return None
            player = match.player_for(user_id)
            if player is None:
                return None

            player.ready = True
            started = (
                match.status == MatchStatus.READY
                and match.player1 is not None
                and match.player2 is not None
                and match.player1.ready
                and match.player2.ready
            )
            if started:
                match.status = MatchStatus.IN_PROGRESS
                match.started_at = self._clock()
            snapshot = match.snapshot()

        if started:
            logger.info("Match %s started", match_id)
            if self.on_match_started is not None:
                self.on_match_started(snapshot)
        return snapshot

    def set_result(self, match_id: str, result: CompareResponse) -> bool:
        """
        Store the comparison result and complete the match.

        Returns False, changing nothing, when the match is gone or is not
        ``in_progress`` (which includes an already completed match).
        """
        with self.store.lock:
            match = self.store.get(match_id)
            if match is None:
                logger.info("Match %s vanished before its result arrived", match_id)
                return False
            if match.status != MatchStatus.IN_PROGRESS:
                logger.warning(
                    "Ignoring result for match %s in status %s",
                    match_id,
                    match.status.value,
                )
                return False

            # Result before status: a reader never sees completed without it
            match.result = result
            match.completed_at = self._clock()
            match.status = MatchStatus.COMPLETED

        logger.info("Match %s completed", match_id)
        return True

    def get_match(self, match_id: str) -> Match | None:
        with self.store.lock:
            match = self.store.get(match_id)
            return match.snapshot() if match else None

    def get_user_match(self, user_id: str | None) -> Match | None:
        user_id = self._require_identity(user_id)
        with self.store.lock:
            match = self.store.match_for_user(user_id)
            return match.snapshot() if match else None

    def get_active_user_match(self, user_id: str | None) -> Match | None:
        """The caller's match unless it has already completed."""
        match = self.get_user_match(user_id)
        if match is None or not match.is_active:
            return None
        return match

    def delete_match(self, match_id: str) -> bool:
        with self.store.lock:
            deleted = self.store.delete(match_id)
        if deleted is None:
            return False
        logger.info("Match %s deleted (status=%s)", match_id, deleted.status.value)
        return True
