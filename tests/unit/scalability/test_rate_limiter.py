"""SensitiveOperationLimiter: sliding window, per-actor keys, clock skew, Redis backend."""

from unittest.mock import AsyncMock

import pytest

from performance_api.scalability.rate_limiter import (
    InMemorySlidingWindowBackend,
    RedisSlidingWindowBackend,
    SensitiveOperationLimiter,
)
from performance_api.security.exceptions import RateLimitExceededError


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return InMemorySlidingWindowBackend()


@pytest.fixture
def limiter(backend, clock):
    return SensitiveOperationLimiter(backend, window_seconds=900, max_attempts=5, clock=clock)


@pytest.mark.asyncio
async def test_five_allowed_sixth_rejected(limiter):
    for _ in range(5):
        await limiter.hit("user-1")
    with pytest.raises(RateLimitExceededError) as exc_info:
        await limiter.hit("user-1")
    assert exc_info.value.message == "Too many sensitive operations. Please try again later."
    assert exc_info.value.retry_after_seconds == 900


@pytest.mark.asyncio
async def test_window_slides(limiter, clock):
    for _ in range(5):
        await limiter.hit("user-1")
    clock.now += 900
    await limiter.hit("user-1")


@pytest.mark.asyncio
async def test_rejections_are_not_recorded(limiter, backend, clock):
    for _ in range(5):
        await limiter.hit("user-1")
    for _ in range(3):
        assert await limiter.allow("user-1") is False
    assert len(backend.attempts("rate:sensitive:sensitive:user-1")) == 5


@pytest.mark.asyncio
async def test_keys_are_independent(limiter):
    for _ in range(5):
        await limiter.hit("user-1")
    assert await limiter.allow("user-2") is True
    assert await limiter.allow("10.0.0.1") is True


@pytest.mark.asyncio
async def test_scopes_are_independent(backend, clock):
    a = SensitiveOperationLimiter(backend, window_seconds=60, max_attempts=1, scope="a", clock=clock)
    b = SensitiveOperationLimiter(backend, window_seconds=60, max_attempts=1, scope="b", clock=clock)
    assert await a.allow("u") is True
    assert await b.allow("u") is True
    assert await a.allow("u") is False


@pytest.mark.asyncio
async def test_future_timestamps_count_after_clock_moves_back(limiter, backend, clock):
    for _ in range(5):
        await limiter.hit("user-1")
    clock.now -= 3_600
    assert await limiter.allow("user-1") is False
    assert len(backend.attempts("rate:sensitive:sensitive:user-1")) == 5


@pytest.mark.asyncio
async def test_retained_timestamps_are_inside_window(limiter, backend, clock):
    await limiter.hit("user-1")
    clock.now += 600
    await limiter.hit("user-1")
    clock.now += 400
    await limiter.hit("user-1")
    retained = backend.attempts("rate:sensitive:sensitive:user-1")
    assert all(t > clock.now - 900 for t in retained)
    assert len(retained) == 2


@pytest.mark.parametrize("window,max_attempts", [(0, 5), (-1, 5), (900, 0), (900, -3)])
def test_non_positive_configuration_rejected(backend, window, max_attempts):
    with pytest.raises(ValueError):
        SensitiveOperationLimiter(backend, window_seconds=window, max_attempts=max_attempts)


@pytest.mark.asyncio
async def test_redis_backend_one_script_call_per_attempt(clock):
    redis_client = AsyncMock()
    redis_client.sliding_window_acquire = AsyncMock(side_effect=[True, False])
    limiter = SensitiveOperationLimiter(
        RedisSlidingWindowBackend(redis_client), window_seconds=900, max_attempts=5, clock=clock
    )
    await limiter.hit("user-1")
    with pytest.raises(RateLimitExceededError):
        await limiter.hit("user-1")
    assert redis_client.sliding_window_acquire.await_count == 2
    args, kwargs = redis_client.sliding_window_acquire.call_args
    assert args == ("rate:sensitive:sensitive:user-1",)
    assert kwargs["now"] == clock.now
    assert kwargs["window_seconds"] == 900
    assert kwargs["max_attempts"] == 5
