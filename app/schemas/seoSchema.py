from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def normalize_page_path(path: str) -> str:
    """'about-us', '/about-us/' and '/about-us' all map to '/about-us'."""
    path = (path or "").strip().strip("/")
    return f"/{path}"


class SEOMetadataBase(BaseModel):
    page_path: str = Field(min_length=1, max_length=255)
    page_title: str = Field(min_length=1, max_length=255)
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = Field(default=None, max_length=500)
    og_title: Optional[str] = Field(default=None, max_length=255)
    og_description: Optional[str] = None
    og_image: Optional[str] = Field(default=None, max_length=500)
    canonical_url: Optional[str] = Field(default=None, max_length=500)


class SEOMetadataUpsert(SEOMetadataBase):
    @field_validator("page_path")
    @classmethod
    def normalize_path(cls, value: str) -> str:
        return normalize_page_path(value)


class SEOMetadataResponse(SEOMetadataBase):
    id: Optional[int] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
