"""Per-(provider, client) sliding-window rate limiting.

Windows live in process memory, so each Lambda instance counts on its own and
horizontally scaled deployments admit up to ``cap * instances`` requests. A
shared store can be plugged in behind the ``RateLimiter`` protocol.
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Mapping
from typing import Protocol

from .constants import RATE_LIMIT_SWEEP_INTERVAL_SECONDS, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    def check_rate_limit(self, provider_id: str, client_id: str) -> bool:
        """Admit and record the request, or reject it without recording."""
        ...


class SlidingWindowRateLimiter:
    def __init__(
        self,
        limits: Mapping[str, int],
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = RATE_LIMIT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._limits = dict(limits)
        self._window_seconds = window_seconds
        self._clock = clock
        self._sweep_interval_seconds = sweep_interval_seconds
        self._windows: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @staticmethod
    def window_key(provider_id: str, client_id: str) -> str:
        return f"{provider_id}-{client_id}"

    def limit_for(self, provider_id: str) -> int | None:
        limit = self._limits.get(provider_id)
        return limit if limit else None

    def check_rate_limit(self, provider_id: str, client_id: str) -> bool:
        limit = self.limit_for(provider_id)
        if limit is None:
            return True

        key = self.window_key(provider_id, client_id)
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            window = self._windows.setdefault(key, deque())
            self._prune(window, now)
            if len(window) >= limit:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"provider": provider_id, "client_id": client_id, "limit": limit},
                )
                return False
            window.append(now)
            return True

    def request_count(self, provider_id: str, client_id: str) -> int:
        key = self.window_key(provider_id, client_id)
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return 0
            self._prune(window, self._clock())
            return len(window)

    def tracked_keys(self) -> list[str]:
        with self._lock:
            return list(self._windows)

    def sweep(self) -> int:
        """Drop windows with no timestamp inside the window; returns how many."""
        with self._lock:
            return self._sweep(self._clock())

    def _prune(self, window: deque[float], now: float) -> None:
        cutoff = now - self._window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self._sweep_interval_seconds:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        cutoff = now - self._window_seconds
        stale = [key for key, window in self._windows.items() if not window or window[-1] <= cutoff]
        for key in stale:
            del self._windows[key]
        self._last_sweep = now
        if stale:
            logger.debug("Swept idle rate-limit windows", extra={"count": len(stale)})
        return len(stale)
