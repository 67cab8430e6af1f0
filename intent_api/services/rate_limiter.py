"""Sliding-window rate limiter with an injectable clock."""

import threading
import time
from collections import deque
from collections.abc import Callable

from intent_api.errors import RateLimitExceeded


class SlidingWindowRateLimiter:
    """
    Allow at most `max_calls` acquisitions per `window_seconds`.

    Keeps a bounded deque of recent call timestamps; max_calls <= 0 disables it.
    """

    def __init__(
        self,
        max_calls: int,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._calls: deque[float] = deque(maxlen=max(max_calls, 1))
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.max_calls > 0

    def _evict(self, now: float) -> None:
        while self._calls and now - self._calls[0] >= self.window_seconds:
            self._calls.popleft()

    def acquire(self) -> None:
        if not self.enabled:
            return
        with self._lock:
            now = self._clock()
            self._evict(now)
            if len(self._calls) >= self.max_calls:
                raise RateLimitExceeded(self.window_seconds - (now - self._calls[0]))
            self._calls.append(now)
