"""In-process token bucket used to throttle login attempts."""

import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from meetmax.domain.exceptions import RateLimited

logger = logging.getLogger(__name__)


class LoginRateLimiter:
    """Allows ``limit`` attempts per ``window_seconds`` for each requester key."""

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_seconds <= 0:
            logger.warning("Invalid login rate window %s; defaulting to 60 seconds", window_seconds)
            window_seconds = 60
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._buckets: Dict[str, Tuple[float, float]] = {}
        self._last_prune = clock()
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        if self.limit <= 0:
            return
        refill_rate = float(self.limit) / float(self.window_seconds)
        now = self._clock()
        with self._lock:
            self._prune(now)
            tokens, last_ts = self._buckets.get(key, (float(self.limit), now))
            elapsed = max(0.0, now - last_ts)
            tokens = min(float(self.limit), tokens + elapsed * refill_rate)
            allowed = tokens >= 1
            if allowed:
                tokens -= 1
            self._buckets[key] = (tokens, now)

        if not allowed:
            retry_after = max(1, math.ceil((1 - tokens) / refill_rate))
            logger.warning("Login attempts throttled for %s", key)
            raise RateLimited(retry_after=retry_after)

    def _prune(self, now: float) -> None:
        # a bucket idle for a full window has refilled to the limit
        if now - self._last_prune < self.window_seconds:
            return
        self._last_prune = now
        stale = [key for key, (_, last_ts) in self._buckets.items() if now - last_ts >= self.window_seconds]
        for key in stale:
            del self._buckets[key]

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()
