"""Fixed-window request counter keyed by client address."""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float  # epoch seconds when the current window closes

    def retry_after(self, now: float) -> int:
        return max(1, math.ceil(self.reset_at - now))


class RateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and say whether it may proceed."""
        now = self._clock()
        with self._lock:
            reset_at, count = self._windows.get(key, (0.0, 0))
            if now >= reset_at:
                reset_at, count = now + self.window_seconds, 0

            if count >= self.max_requests:
                self._windows[key] = (reset_at, count)
                return RateLimitDecision(allowed=False, remaining=0, reset_at=reset_at)

            count += 1
            self._windows[key] = (reset_at, count)
            # Expired windows of other clients are dropped once they pile up
            if len(self._windows) > 10_000:
                self._prune(now)
            return RateLimitDecision(
                allowed=True,
                remaining=self.max_requests - count,
                reset_at=reset_at,
            )

    def _prune(self, now: float) -> None:
        expired = [key for key, (reset_at, _) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
