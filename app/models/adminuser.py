from sqlalchemy import Column, Integer, String, DateTime, Boolean

from app.constants.constants import AdminRole
from app.models.base import Base, TimestampMixin


class AdminUser(Base, TimestampMixin):
    """Admin panel account. Created by the provisioning scripts only."""

    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(String(50), default=AdminRole.admin.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
