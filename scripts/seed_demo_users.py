# scripts/seed_demo_users.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from performance_api.config.settings import get_settings
from performance_api.container import build_container
from performance_api.infrastructure.seed import seed_demo_users

async def seed():
    settings = get_settings()
    if settings.environment == "prod":
        print("Refusing to seed demo users in prod")
        return
    container = build_container(settings)
    await container.startup()
    created = await seed_demo_users(container.users, container.resources)
    print("Demo users created:", created)
    await container.shutdown()

asyncio.run(seed())
