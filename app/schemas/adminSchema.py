from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    """`username` may hold either the username or the email address."""
    username: Optional[str] = None
    password: Optional[str] = None


class AdminUserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = Field(default=None, serialization_alias="fullName")
    role: str
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminLoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    user: AdminUserResponse


class SubmissionResponse(BaseModel):
    id: int
    form_type: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    organisation_name: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    requirement: Optional[str] = None
    estimated_volume: Optional[str] = None
    order_release_date: Optional[str] = None
    cad_file: Optional[str] = None
    rfq_file: Optional[str] = None
    certification_type: Optional[str] = None
    submitted_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class SubmissionListResponse(BaseModel):
    success: bool = True
    data: List[SubmissionResponse]
    pagination: Pagination


class FormTypeCount(BaseModel):
    form_type: str
    count: int


class SubmissionStats(BaseModel):
    total: int
    today: int
    thisWeek: int
    thisMonth: int
    byType: List[FormTypeCount]


class SMTPSettingsUpdate(BaseModel):
    host: Optional[str] = None
    port: Optional[int] = None
    secure: Optional[bool] = None
    user: Optional[str] = None
    fromEmail: Optional[str] = None
    fromName: Optional[str] = None
