"""Time-expiring in-memory caches for GitHub signals and generated roasts."""

import threading
import time
from typing import Callable, Generic, Hashable, TypeVar

from app.schemas.github import GitHubSignals
from app.schemas.roast import RoastResult

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    Unbounded map whose entries expire ``ttl_seconds`` after being set.

    Expired entries are dropped lazily when read.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, V]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class GitHubCache:
    """Signals keyed by (username, max_repos, include_readme)."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._cache: TTLCache[GitHubSignals] = TTLCache(ttl_seconds, clock)

    @staticmethod
    def _key(username: str, max_repos: int, include_readme: bool) -> tuple:
        return (username.lower(), max_repos, include_readme)

    def get(self, username: str, max_repos: int, include_readme: bool) -> GitHubSignals | None:
        return self._cache.get(self._key(username, max_repos, include_readme))

    def set(
        self,
        username: str,
        max_repos: int,
        include_readme: bool,
        signals: GitHubSignals,
    ) -> None:
        self._cache.set(self._key(username, max_repos, include_readme), signals)

    def clear(self) -> None:
        self._cache.clear()


class RoastCache:
    """Roast results keyed by (username, intensity)."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._cache: TTLCache[RoastResult] = TTLCache(ttl_seconds, clock)

    def get(self, username: str, intensity: str) -> RoastResult | None:
        return self._cache.get((username.lower(), intensity))

    def set(self, username: str, intensity: str, roast: RoastResult) -> None:
        self._cache.set((username.lower(), intensity), roast)

    def clear(self) -> None:
        self._cache.clear()
