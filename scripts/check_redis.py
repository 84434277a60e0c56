# scripts/check_redis.py

import sys
import time
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from performance_api.config.settings import get_settings
from performance_api.infrastructure.cache.redis_client import RedisClient
from performance_api.scalability.rate_limiter import RedisSlidingWindowBackend, SensitiveOperationLimiter

async def check():
    settings = get_settings()
    r = RedisClient(settings.redis_url or "redis://localhost:6379/0")
    print("Ping:", await r.ping())

    limiter = SensitiveOperationLimiter(
        RedisSlidingWindowBackend(r),
        window_seconds=5,
        max_attempts=2,
        scope=f"check-{int(time.time())}",
    )
    for attempt in range(3):
        print(f"Attempt {attempt + 1} allowed:", await limiter.allow("script"))

    await r.close()

asyncio.run(check())
