from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime

from app.models.base import Base


class SEOMetadata(Base):
    """SEO metadata for one page of the public site, keyed by page path."""

    __tablename__ = "seo_metadata"

    id = Column(Integer, primary_key=True, autoincrement=True)
    page_path = Column(String(255), unique=True, index=True, nullable=False)
    page_title = Column(String(255), nullable=False)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(String(500), nullable=True)
    og_title = Column(String(255), nullable=True)
    og_description = Column(Text, nullable=True)
    og_image = Column(String(500), nullable=True)
    canonical_url = Column(String(500), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
