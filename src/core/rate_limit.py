"""In-memory fixed-window rate limiting.

Counters live in process memory, so limits are per process. Multiple workers
or instances each keep their own counts.
"""

import logging
import threading
import time
from typing import Callable, Dict, Tuple

from fastapi import Request

from config import (
    PASSWORD_RESET_RATE_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
    REGISTER_RATE_LIMIT,
)
from core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Resolve the client address from proxy headers.

    Uses the first x-forwarded-for entry, then x-real-ip, then "unknown".
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return "unknown"


class RateLimiter:
    """Fixed-window counter keyed by client identifier."""

    def __init__(
        self,
        limit: int,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the limiter.

        Args:
            limit: Maximum requests allowed per window.
            window_seconds: Window length in seconds.
            clock: Time source returning seconds, replaceable in tests.
        """
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._records: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str) -> None:
        """Count one request for ``key``.

        Raises:
            RateLimitExceededError: If the key already used up its window.
        """
        now = self.clock()
        with self._lock:
            self._prune(now)
            count, reset_at = self._records.get(key, (0, 0.0))
            if now > reset_at:
                self._records[key] = (1, now + self.window_seconds)
                return
            if count >= self.limit:
                logger.warning("Rate limit exceeded for %s", key)
                raise RateLimitExceededError(int(reset_at - now) + 1)
            self._records[key] = (count + 1, reset_at)

    def _prune(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._records.items() if now > reset_at]
        for key in expired:
            del self._records[key]

    def reset(self) -> None:
        with self._lock:
            self._records.clear()


register_limiter = RateLimiter(REGISTER_RATE_LIMIT)
password_reset_limiter = RateLimiter(PASSWORD_RESET_RATE_LIMIT)
