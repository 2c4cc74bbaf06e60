import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import asyncio
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import AdminRole
from app.core.config import Settings
from app.core.database import DatabaseSessionManager
from app.core.security import hash_password
from app.models.adminuser import AdminUser


async def find_admin(db: AsyncSession, username: str, email: str):
    result = await db.execute(
        select(AdminUser).where(or_(AdminUser.username == username, AdminUser.email == email))
    )
    return result.scalars().first()


async def create_admin_if_missing(db: AsyncSession, settings: Settings) -> bool:
    """Create the admin account from ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD. Returns False if it exists."""
    existing = await find_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_EMAIL)
    if existing:
        print(f"ℹ️ Admin user already exists: {existing.username}")
        return False

    db.add(AdminUser(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        full_name="Administrator",
        role=AdminRole.admin.value,
        is_active=True,
    ))
    await db.commit()
    print(f"✅ Admin user created: {settings.ADMIN_USERNAME}")
    return True


async def init_admin():
    settings = Settings()
    session_manager = DatabaseSessionManager(settings)
    if not await session_manager.init():
        print("❌ Database is not reachable, check the DB_* settings")
        sys.exit(1)

    try:
        async with session_manager.get_session() as db:
            await create_admin_if_missing(db, settings)
        print("⚠️ Change the default password after first login")
    finally:
        await session_manager.close()


if __name__ == "__main__":
    asyncio.run(init_admin())
