# performance_api/infrastructure/cache/redis_client.py

import math

import redis.asyncio as redis

# KEYS[1]=window key; ARGV: now, window seconds, max attempts, unique member.
_SLIDING_WINDOW_SCRIPT = """
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
redis.call('ZREMRANGEBYSCORE', KEYS[1], '-inf', now - window)
if redis.call('ZCARD', KEYS[1]) >= tonumber(ARGV[3]) then
    return 0
end
redis.call('ZADD', KEYS[1], now, ARGV[4])
redis.call('PEXPIRE', KEYS[1], ARGV[5])
return 1
"""


class RedisClient:
    def __init__(self, url: str):
        self.client = redis.from_url(
            url,
            decode_responses=True,
        )

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def sliding_window_acquire(
        self,
        key: str,
        *,
        now: float,
        window_seconds: float,
        max_attempts: int,
        member: str,
    ) -> bool:
        """Atomically prune, count and record one attempt. Returns True if recorded."""
        ttl_ms = math.ceil(window_seconds * 1000)
        result = await self.client.eval(
            _SLIDING_WINDOW_SCRIPT,
            1,
            key,
            now,
            window_seconds,
            max_attempts,
            member,
            ttl_ms,
        )
        return bool(result)

    async def close(self) -> None:
        await self.client.aclose()
