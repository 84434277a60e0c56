# scripts/check_db.py
import sys
from pathlib import Path
from sqlalchemy import text

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from performance_api.config.settings import get_settings
from performance_api.infrastructure.database.session import create_engine, create_tables

async def check_connection():
    settings = get_settings()
    if not settings.database_url:
        print("DATABASE_URL is not set")
        return
    engine = create_engine(settings.database_url)
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
    await create_tables(engine)
    print("Tables ready")
    await engine.dispose()

asyncio.run(check_connection())
