"""Fixed-window limiter for player join attempts."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class JoinRateLimiter:
    """Allow at most ``max_attempts`` per client key in each ``window_seconds`` window."""

    def __init__(
        self,
        *,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max(1, int(max_attempts))
        self.window_seconds = max(0.0, float(window_seconds))
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def allow(self, client_key: str) -> bool:
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            started_at, count = self._windows.get(client_key, (now, 0))
            if count >= self.max_attempts:
                self._windows[client_key] = (started_at, count)
                return False
            self._windows[client_key] = (started_at, count + 1)
            return True

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (started_at, _count) in self._windows.items() if now - started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
