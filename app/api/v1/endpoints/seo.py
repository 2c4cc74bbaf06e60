"""Public SEO lookup used by the frontend's head manager."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.seo_defaults import fallback_seo_record
from app.core.config import Settings, get_settings
from app.core.database import aget_db
from app.schemas.seoSchema import SEOMetadataResponse, normalize_page_path
from app.utils.seo_metadata import get_seo_metadata

router = APIRouter(
    prefix="/seo",
    tags=["seo"]
)


@router.get("/{page_path:path}")
async def get_page_seo(
    page_path: str,
    db: AsyncSession = Depends(aget_db),
    settings: Settings = Depends(get_settings),
):
    """
    Metadata for one page. Never a 404: pages without a stored record get
    the site-wide default with a canonical URL for the requested path.
    """
    path = normalize_page_path(page_path)
    metadata = await get_seo_metadata(db, path)

    if metadata is None:
        return {
            "success": True,
            "data": fallback_seo_record(path, settings.SITE_NAME, settings.SITE_URL),
        }

    return {"success": True, "data": SEOMetadataResponse.model_validate(metadata)}
