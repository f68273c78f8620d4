"""Fixed-window rate limiting for parse requests, Redis-backed or in-memory."""
import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

import redis

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a key has used up its quota for the current window."""

    def __init__(self, limit: int, window: int, retry_after: int):
        self.limit = limit
        self.window = window
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded: {limit} requests per {window} seconds. "
            f"Retry after {retry_after} seconds."
        )


class RateLimiter:
    """Rate limiter interface.

    ``check`` consumes one unit of quota and reports whether the request may
    proceed. ``record`` reports how an allowed request ended.
    """

    def __init__(self, limit: int = 10, window: int = 3600):
        self.limit = limit
        self.window = window

    def check(self, key: str) -> bool:
        raise NotImplementedError

    def retry_after(self, key: str) -> int:
        """Seconds until ``key`` gets a fresh window."""
        raise NotImplementedError

    def record(self, key: str, outcome: str) -> None:
        logger.debug("Rate limit key %s finished with outcome %s", key, outcome)

    def enforce(self, key: str) -> None:
        """
        Raises:
            RateLimitExceeded: If ``key`` is over its quota
        """
        if not self.check(key):
            raise RateLimitExceeded(self.limit, self.window, self.retry_after(key))


class InMemoryRateLimiter(RateLimiter):
    """
    Per-process fixed window counter.

    Good for single-server deployments and tests; counters are lost on
    restart and not shared between instances.
    """

    def __init__(self, limit: int = 10, window: int = 3600, clock: Callable[[], float] = time.time):
        super().__init__(limit, window)
        self._clock = clock
        # key -> (count, window reset timestamp)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._outcomes: Dict[str, Dict[str, int]] = {}
        self._lock = threading.Lock()
        self._next_cleanup = clock() + window

    def check(self, key: str) -> bool:
        now = self._clock()
        if now >= self._next_cleanup:
            self.cleanup()
        with self._lock:
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now >= reset_at:
                self._windows[key] = (1, now + self.window)
                self._outcomes.pop(key, None)
                return True
            if count >= self.limit:
                return False
            self._windows[key] = (count + 1, reset_at)
            return True

    def retry_after(self, key: str) -> int:
        with self._lock:
            _, reset_at = self._windows.get(key, (0, 0.0))
        return max(0, int(reset_at - self._clock()) + 1) if reset_at else 0

    def record(self, key: str, outcome: str) -> None:
        with self._lock:
            counts = self._outcomes.setdefault(key, {})
            counts[outcome] = counts.get(outcome, 0) + 1
        super().record(key, outcome)

    def outcomes(self, key: str) -> Dict[str, int]:
        with self._lock:
            return dict(self._outcomes.get(key, {}))

    def cleanup(self) -> None:
        """Drop keys whose window has expired, along with their outcome counts."""
        now = self._clock()
        with self._lock:
            self._next_cleanup = now + self.window
            expired = [k for k, (_, reset_at) in self._windows.items() if reset_at <= now]
            for key in expired:
                del self._windows[key]
            for key in [k for k in self._outcomes if k not in self._windows]:
                del self._outcomes[key]
        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired rate limit keys")


class RedisRateLimiter(RateLimiter):
    """
    Redis-based fixed window counter (INCR + EXPIRE).

    Works across multiple instances and survives restarts. Fails open on
    Redis errors so a cache outage does not block uploads.
    """

    def __init__(self, client: "redis.Redis", limit: int = 10, window: int = 3600, prefix: str = "ratelimit"):
        super().__init__(limit, window)
        self.redis = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def _incr(self, redis_key: str) -> int:
        count = int(self.redis.incr(redis_key))
        # First hit opens the window
        if count == 1:
            self.redis.expire(redis_key, self.window)
        return count

    def check(self, key: str) -> bool:
        redis_key = self._key(key)
        try:
            count = self._incr(redis_key)
        except redis.RedisError as e:
            logger.error(f"Redis rate limit check failed: {e}")
            return True
        return count <= self.limit

    def retry_after(self, key: str) -> int:
        try:
            ttl = self.redis.ttl(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Redis TTL lookup failed: {e}")
            return self.window
        return int(ttl) if ttl and ttl > 0 else self.window

    def record(self, key: str, outcome: str) -> None:
        outcome_key = f"{self._key(key)}:outcome:{outcome}"
        try:
            self._incr(outcome_key)
        except redis.RedisError as e:
            logger.error(f"Redis outcome record failed: {e}")
        super().record(key, outcome)


def create_rate_limiter(
    backend: str = "memory",
    limit: int = 10,
    window: int = 3600,
    redis_url: Optional[str] = None,
) -> RateLimiter:
    """Create a rate limiter for the configured backend ("memory" or "redis")."""
    if backend == "redis":
        client = redis.Redis.from_url(redis_url or "redis://localhost:6379/0")
        logger.info("Redis rate limiter initialized (%d per %ds)", limit, window)
        return RedisRateLimiter(client, limit=limit, window=window)
    if backend != "memory":
        raise ValueError(f"Unknown rate limit backend: {backend}")
    logger.info("In-memory rate limiter initialized (%d per %ds)", limit, window)
    return InMemoryRateLimiter(limit=limit, window=window)
