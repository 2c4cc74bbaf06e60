import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.database import DatabaseSessionManager
from app.core.security import hash_password
from scripts.init_admin import create_admin_if_missing, find_admin


async def reset_admin_password(db: AsyncSession, settings: Settings):
    """Reset the admin password to ADMIN_PASSWORD and re-activate the account, creating it if needed."""
    admin = await find_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_EMAIL)
    if not admin:
        await create_admin_if_missing(db, settings)
        return

    admin.password_hash = hash_password(settings.ADMIN_PASSWORD)
    admin.is_active = True
    await db.commit()
    print(f"✅ Password reset for admin user: {admin.username}")


async def reset_admin():
    settings = Settings()
    session_manager = DatabaseSessionManager(settings)
    if not await session_manager.init():
        print("❌ Database is not reachable, check the DB_* settings")
        sys.exit(1)

    try:
        async with session_manager.get_session() as db:
            await reset_admin_password(db, settings)
    finally:
        await session_manager.close()


if __name__ == "__main__":
    asyncio.run(reset_admin())
