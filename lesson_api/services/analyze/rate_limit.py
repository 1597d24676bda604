from __future__ import annotations

from dataclasses import dataclass
import math
from threading import Lock
import time
from typing import Callable, Protocol


class RateLimitStore(Protocol):
    """Counter backend for the ingress rate limit.

    The in-memory store is per process; a shared cache can implement the same
    two methods for multi-instance deployments.
    """

    def increment(self, key: str) -> int:
        ...

    def retry_after(self, key: str) -> int:
        ...


@dataclass
class _Window:
    started_at: float
    count: int


class InMemoryRateLimitStore:
    """Fixed-window counters keyed by client."""

    def __init__(
        self,
        *,
        window_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 100,
    ) -> None:
        self.window_sec = float(window_sec)
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = Lock()
        self._sweep_every = max(1, int(sweep_every))
        self._increments = 0

    def increment(self, key: str) -> int:
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_sec:
                window = _Window(started_at=now, count=0)
                self._windows[key] = window
            window.count += 1

            self._increments += 1
            if self._increments % self._sweep_every == 0:
                self._sweep(now)
            return window.count

    def retry_after(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return 0
            remaining = window.started_at + self.window_sec - self._clock()
            return max(0, math.ceil(remaining))

    def _sweep(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if now - window.started_at >= self.window_sec]
        for key in stale:
            del self._windows[key]


class RateLimiter:
    def __init__(self, *, store: RateLimitStore, max_requests: int) -> None:
        self.store = store
        self.max_requests = max(1, int(max_requests))

    def hit(self, key: str) -> tuple[bool, int]:
        """Count one request. Returns (allowed, retry_after_sec)."""
        count = self.store.increment(key)
        if count <= self.max_requests:
            return True, 0
        return False, max(1, self.store.retry_after(key))
