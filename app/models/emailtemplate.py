from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from app.models.base import Base, TimestampMixin


class EmailTemplate(Base, TimestampMixin):
    """Admin-editable email template for one form kind and audience."""

    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_type = Column(String(50), nullable=False)
    template_type = Column(String(50), nullable=False)
    subject = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("form_type", "template_type", name="uq_email_template"),
    )
