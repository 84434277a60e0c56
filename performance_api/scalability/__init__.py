"""Scalability layer: sliding-window limiting for sensitive operations. No FastAPI."""

from performance_api.scalability.rate_limiter import (
    InMemorySlidingWindowBackend,
    RedisSlidingWindowBackend,
    SensitiveOperationLimiter,
    SlidingWindowBackend,
)

__all__ = [
    "InMemorySlidingWindowBackend",
    "RedisSlidingWindowBackend",
    "SensitiveOperationLimiter",
    "SlidingWindowBackend",
]
