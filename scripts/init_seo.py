import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

import asyncio

from app.constants.seo_defaults import default_seo_catalogue
from app.core.config import Settings
from app.core.database import DatabaseSessionManager
from app.utils.seo_metadata import upsert_seo_metadata


async def init_seo():
    """Upsert the default SEO metadata for every page of the public site."""
    settings = Settings()
    session_manager = DatabaseSessionManager(settings)
    if not await session_manager.init():
        print("❌ Database is not reachable, check the DB_* settings")
        sys.exit(1)

    try:
        async with session_manager.get_session() as db:
            catalogue = default_seo_catalogue(settings.SITE_URL)
            for page in catalogue:
                await upsert_seo_metadata(db, page)
                print(f"  • {page['page_path']}")
            await db.commit()
        print(f"✅ SEO metadata initialized for {len(catalogue)} pages")
    finally:
        await session_manager.close()


if __name__ == "__main__":
    asyncio.run(init_seo())
