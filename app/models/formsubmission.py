from sqlalchemy import Column, Index, Integer, String, Text, DateTime
from datetime import datetime

from app.models.base import Base


class FormSubmission(Base):
    """Model for lead-capture form submissions (contact, quote, certification)."""

    __tablename__ = "form_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_type = Column(String(50), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)
    organisation_name = Column(String(255), nullable=True)
    street_address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    requirement = Column(Text, nullable=True)
    estimated_volume = Column(String(500), nullable=True)
    order_release_date = Column(String(500), nullable=True)
    cad_file = Column(String(500), nullable=True)
    rfq_file = Column(String(500), nullable=True)
    certification_type = Column(String(100), nullable=True)
    # Set once on insert, never touched again
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_submission_email", "email"),
        Index("idx_submission_form_type", "form_type"),
        Index("idx_submission_submitted_at", "submitted_at"),
    )
