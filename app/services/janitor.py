"""Periodic eviction of completed matches."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.models.match import MatchStatus
from app.services.match_coordinator import MatchCoordinator

logger = logging.getLogger(__name__)


class MatchJanitor:
    """
    Deletes matches that completed more than ``retention`` ago.

    Matches still waiting, ready or in progress are never swept.
    """

    def __init__(
        self,
        coordinator: MatchCoordinator,
        retention: timedelta = timedelta(hours=1),
        interval_seconds: float = 300,
        clock: Callable[[], datetime] | None = None,
    ):
        self.coordinator = coordinator
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.retention = retention
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    def sweep(self, now: datetime | None = None) -> int:
        now = now or self._clock()
        cutoff = now - self.retention
        expired = [
            match.match_id
            for match in self.coordinator.store.all_matches()
            if match.status == MatchStatus.COMPLETED
            and match.completed_at is not None
            and match.completed_at < cutoff
        ]

        removed = sum(1 for match_id in expired if self.coordinator.delete_match(match_id))
        if removed:
            logger.info("Janitor evicted %d completed match(es)", removed)
        return removed

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.exception("Match sweep failed")

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run(), name="match-janitor"
            )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
