"""Sliding-window limiter for sensitive operations. Backend (in-memory or Redis) is injected."""

import asyncio
import logging
import math
import time
import uuid
from typing import Callable, Dict, List, Protocol

from performance_api.infrastructure.cache.redis_client import RedisClient
from performance_api.security.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 15 * 60
DEFAULT_MAX_ATTEMPTS = 5


class SlidingWindowBackend(Protocol):
    """Keyed attempt store. try_acquire must be atomic per key."""

    async def try_acquire(self, key: str, now: float, window_seconds: float, max_attempts: int) -> bool:
        """Prune entries <= now - window; if remaining >= max return False, else record now and return True."""
        ...


class InMemorySlidingWindowBackend:
    """
    In-process sliding window: key -> attempt timestamps, one asyncio.Lock per key.
    State lives as long as the owning container; nothing is persisted.
    """

    def __init__(self) -> None:
        self._windows: Dict[str, List[float]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def try_acquire(self, key: str, now: float, window_seconds: float, max_attempts: int) -> bool:
        async with self._lock_for(key):
            cutoff = now - window_seconds
            # Timestamps ahead of now (clock moved back) are kept and still count.
            attempts = [t for t in self._windows.get(key, []) if t > cutoff]
            if len(attempts) >= max_attempts:
                self._windows[key] = attempts
                return False
            attempts.append(now)
            self._windows[key] = attempts
            return True

    def attempts(self, key: str) -> List[float]:
        return list(self._windows.get(key, []))


class RedisSlidingWindowBackend:
    """Sorted set per key; prune/count/add run as one Lua script so workers share a limit."""

    def __init__(self, redis_client: RedisClient) -> None:
        self._redis = redis_client

    async def try_acquire(self, key: str, now: float, window_seconds: float, max_attempts: int) -> bool:
        return await self._redis.sliding_window_acquire(
            key,
            now=now,
            window_seconds=window_seconds,
            max_attempts=max_attempts,
            member=f"{now}:{uuid.uuid4().hex}",
        )


class SensitiveOperationLimiter:
    """
    Bound attempts per actor (user id, else client IP) within a trailing window.
    Rejected attempts are not recorded.
    """

    def __init__(
        self,
        backend: SlidingWindowBackend,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        scope: str = "sensitive",
        clock: Callable[[], float] = time.time,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        self._backend = backend
        self._window = window_seconds
        self._max = max_attempts
        self._scope = scope
        self._clock = clock
        self._key_prefix = "rate:sensitive:"

    def _key(self, actor_key: str) -> str:
        return f"{self._key_prefix}{self._scope}:{actor_key}"

    async def allow(self, actor_key: str) -> bool:
        """Record an attempt if under the limit. Returns False when the limit is reached."""
        return await self._backend.try_acquire(
            self._key(actor_key), self._clock(), self._window, self._max
        )

    async def hit(self, actor_key: str) -> None:
        """allow(), raising RateLimitExceededError on rejection."""
        if not await self.allow(actor_key):
            logger.warning(
                "sensitive_operation_limited",
                extra={"scope": self._scope, "actor_key": actor_key},
            )
            raise RateLimitExceededError(
                "Too many sensitive operations. Please try again later.",
                retry_after_seconds=math.ceil(self._window),
            )
