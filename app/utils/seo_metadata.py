from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.seometadata import SEOMetadata

SEO_FIELDS = (
    "page_title",
    "meta_description",
    "meta_keywords",
    "og_title",
    "og_description",
    "og_image",
    "canonical_url",
)


async def get_seo_metadata(db: AsyncSession, page_path: str) -> Optional[SEOMetadata]:
    result = await db.execute(select(SEOMetadata).where(SEOMetadata.page_path == page_path))
    return result.scalar_one_or_none()


async def upsert_seo_metadata(db: AsyncSession, values: dict) -> SEOMetadata:
    """Insert or update the record for values["page_path"]. The caller commits."""
    metadata = await get_seo_metadata(db, values["page_path"])
    if metadata is None:
        metadata = SEOMetadata(page_path=values["page_path"])
        db.add(metadata)

    for field in SEO_FIELDS:
        setattr(metadata, field, values.get(field))
    metadata.updated_at = datetime.utcnow()

    await db.flush()
    return metadata
