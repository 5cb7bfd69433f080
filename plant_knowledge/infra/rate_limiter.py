from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Optional

from .config import AppConfig, get_config


DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_MAX_REQUESTS = 100


class SlidingWindowRateLimiter:
    """Caps outbound calls to ``max_requests`` per rolling ``window_seconds``."""

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._window_seconds = max(0.0, float(window_seconds))
        self._max_requests = max(1, int(max_requests))
        self._clock = clock or time.monotonic
        self._request_times: Deque[float] = deque()
        self._lock = Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_seconds
        while self._request_times and self._request_times[0] <= cutoff:
            self._request_times.popleft()

    def can_make_request(self) -> bool:
        now = self._clock()
        with self._lock:
            self._prune(now)
            return len(self._request_times) < self._max_requests

    def record_request(self) -> None:
        now = self._clock()
        with self._lock:
            self._request_times.append(now)

    def try_acquire(self) -> bool:
        """Check capacity and record the call in one step."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            if len(self._request_times) >= self._max_requests:
                return False
            self._request_times.append(now)
            return True

    def remaining(self) -> int:
        now = self._clock()
        with self._lock:
            self._prune(now)
            return self._max_requests - len(self._request_times)

    def reset(self) -> None:
        with self._lock:
            self._request_times.clear()


def build_rate_limiter(
    cfg: Optional[AppConfig] = None,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> SlidingWindowRateLimiter:
    cfg = cfg or get_config()
    return SlidingWindowRateLimiter(
        window_seconds=cfg.rate_limit_window_seconds,
        max_requests=cfg.rate_limit_max_requests,
        clock=clock,
    )
