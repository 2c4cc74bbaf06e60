"""Admin panel endpoints: login, submissions, statistics, SEO metadata, SMTP settings and email templates."""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SUBMISSION_SORT,
    LOGIN_RATE_LIMIT,
    MAX_PAGE_SIZE,
    SUBMISSION_SORT_COLUMNS,
)
from app.constants.seo_defaults import default_seo_catalogue
from app.core.config import Settings, get_settings
from app.core.database import aget_db
from app.core.ratelimit import limiter
from app.core.security import create_jwt_token, get_current_admin, verify_password
from app.models.adminuser import AdminUser
from app.models.emailtemplate import EmailTemplate
from app.models.formsubmission import FormSubmission
from app.models.seometadata import SEOMetadata
from app.schemas.adminSchema import (
    AdminLoginRequest,
    AdminLoginResponse,
    AdminUserResponse,
    FormTypeCount,
    Pagination,
    SMTPSettingsUpdate,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStats,
)
from app.schemas.emailtemplateSchema import EmailTemplateResponse, EmailTemplateUpsert
from app.schemas.seoSchema import SEOMetadataResponse, SEOMetadataUpsert, normalize_page_path
from app.utils.email_templates import DEFAULT_EMAIL_TEMPLATES
from app.utils.seo_metadata import get_seo_metadata, upsert_seo_metadata

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"]
)


# ------------------------------
# Helpers
# ------------------------------
def resolve_sort_column(sort_by: Optional[str]):
    """Only allow-listed columns reach ORDER BY; anything else sorts by submitted_at."""
    column_name = sort_by if sort_by in SUBMISSION_SORT_COLUMNS else DEFAULT_SUBMISSION_SORT
    return getattr(FormSubmission, column_name)


def date_window_start(date_filter: Optional[str], now: datetime) -> Optional[datetime]:
    """today = since midnight, week = last 7 days, month = current calendar month."""
    if date_filter == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_filter == "week":
        return now - timedelta(days=7)
    if date_filter == "month":
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def submission_filters(
    form_type: Optional[str] = None,
    search: Optional[str] = None,
    date_filter: Optional[str] = None,
    now: Optional[datetime] = None,
) -> list:
    conditions = []
    if form_type:
        conditions.append(FormSubmission.form_type == form_type)
    if search:
        term = f"%{search}%"
        conditions.append(or_(
            FormSubmission.name.like(term),
            FormSubmission.email.like(term),
            FormSubmission.message.like(term),
        ))
    window_start = date_window_start(date_filter, now or datetime.utcnow())
    if window_start is not None:
        conditions.append(FormSubmission.submitted_at >= window_start)
    return conditions


async def _count(db: AsyncSession, *conditions) -> int:
    result = await db.execute(select(func.count(FormSubmission.id)).where(*conditions))
    return result.scalar_one()


# ------------------------------
# Auth
# ------------------------------
@router.post("/login", response_model=AdminLoginResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: AdminLoginRequest,
    db: AsyncSession = Depends(aget_db),
    settings: Settings = Depends(get_settings),
):
    """Authenticate by username or email and issue a bearer token."""
    if not credentials.username or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    result = await db.execute(
        select(AdminUser).where(
            or_(AdminUser.username == credentials.username, AdminUser.email == credentials.username),
            AdminUser.is_active.is_(True),
        )
    )
    admin = result.scalars().first()

    if not admin or not verify_password(credentials.password, admin.password_hash):
        logger.info(f"🔒 Login attempt failed for {credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    admin.last_login = datetime.utcnow()
    await db.commit()

    token = create_jwt_token({"sub": str(admin.id), "username": admin.username}, settings)
    logger.info(f"✅ Admin {admin.username} logged in")

    return AdminLoginResponse(token=token, user=AdminUserResponse.model_validate(admin))


@router.get("/me")
async def me(current_admin: AdminUser = Depends(get_current_admin)):
    return {
        "success": True,
        "user": AdminUserResponse.model_validate(current_admin).model_dump(by_alias=True),
    }


# ------------------------------
# Submissions
# ------------------------------
@router.get("/submissions", response_model=SubmissionListResponse)
async def list_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    formType: Optional[str] = None,
    search: Optional[str] = None,
    dateFilter: Optional[str] = None,
    sortBy: Optional[str] = DEFAULT_SUBMISSION_SORT,
    sortOrder: Optional[str] = "DESC",
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    """Paginated submissions with optional form kind, text and date filters."""
    conditions = submission_filters(formType, search, dateFilter)
    sort_column = resolve_sort_column(sortBy)
    order = sort_column.asc() if (sortOrder or "").upper() == "ASC" else sort_column.desc()

    result = await db.execute(
        select(FormSubmission)
        .where(*conditions)
        .order_by(order, FormSubmission.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )
    submissions = result.scalars().all()
    total = await _count(db, *conditions)

    return SubmissionListResponse(
        data=[SubmissionResponse.model_validate(submission) for submission in submissions],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            totalPages=math.ceil(total / limit),
        ),
    )


@router.get("/submissions/{submission_id}")
async def get_submission(
    submission_id: int,
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    submission = await db.get(FormSubmission, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")

    return {"success": True, "data": SubmissionResponse.model_validate(submission)}


@router.delete("/submissions/{submission_id}")
async def delete_submission(
    submission_id: int,
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    result = await db.execute(delete(FormSubmission).where(FormSubmission.id == submission_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Submission not found")

    await db.commit()
    logger.info(f"🗑️ Submission {submission_id} deleted by {current_admin.username}")
    return {"success": True, "message": "Submission deleted successfully"}


@router.get("/stats")
async def get_stats(
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    """Counts for the dashboard: total, today, last 7 days, this month and per form kind."""
    now = datetime.utcnow()
    by_type = await db.execute(
        select(FormSubmission.form_type, func.count(FormSubmission.id))
        .group_by(FormSubmission.form_type)
        .order_by(FormSubmission.form_type)
    )

    stats = SubmissionStats(
        total=await _count(db),
        today=await _count(db, FormSubmission.submitted_at >= date_window_start("today", now)),
        thisWeek=await _count(db, FormSubmission.submitted_at >= date_window_start("week", now)),
        thisMonth=await _count(db, FormSubmission.submitted_at >= date_window_start("month", now)),
        byType=[FormTypeCount(form_type=form_type, count=count) for form_type, count in by_type.all()],
    )
    return {"success": True, "stats": stats}


# ------------------------------
# SEO metadata
# ------------------------------
@router.get("/seo")
async def list_seo_metadata(
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    result = await db.execute(select(SEOMetadata).order_by(SEOMetadata.page_path))
    return {
        "success": True,
        "data": [SEOMetadataResponse.model_validate(row) for row in result.scalars().all()],
    }


@router.get("/seo/{page_path:path}")
async def get_seo_metadata_for_page(
    page_path: str,
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    metadata = await get_seo_metadata(db, normalize_page_path(page_path))
    if not metadata:
        raise HTTPException(status_code=404, detail="SEO metadata not found")

    return {"success": True, "data": SEOMetadataResponse.model_validate(metadata)}


@router.post("/seo")
async def save_seo_metadata(
    payload: SEOMetadataUpsert,
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    metadata = await upsert_seo_metadata(db, payload.model_dump())
    await db.commit()
    logger.info(f"🔎 SEO metadata saved for {payload.page_path}")
    return {
        "success": True,
        "message": "SEO metadata saved successfully",
        "data": SEOMetadataResponse.model_validate(metadata),
    }


@router.post("/init-seo")
async def init_seo_metadata(
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
    settings: Settings = Depends(get_settings),
):
    """Upsert the default metadata for every page of the public site."""
    catalogue = default_seo_catalogue(settings.SITE_URL)
    for page in catalogue:
        await upsert_seo_metadata(db, page)
    await db.commit()

    logger.info(f"🔎 SEO metadata initialized for {len(catalogue)} pages")
    return {
        "success": True,
        "message": f"SEO metadata initialized for {len(catalogue)} pages",
    }


# ------------------------------
# SMTP settings
# ------------------------------
@router.get("/smtp-settings")
async def get_smtp_settings(
    current_admin: AdminUser = Depends(get_current_admin),
    settings: Settings = Depends(get_settings),
):
    """Read-only view of the SMTP configuration. The password is never returned."""
    return {
        "success": True,
        "configured": settings.smtp_configured,
        "host": settings.SMTP_HOST,
        "port": settings.SMTP_PORT,
        "secure": settings.SMTP_SECURE,
        "fromEmail": settings.smtp_from_address,
        "fromName": settings.SMTP_FROM_NAME,
    }


@router.post("/smtp-settings")
async def update_smtp_settings(
    payload: SMTPSettingsUpdate,
    current_admin: AdminUser = Depends(get_current_admin),
):
    """SMTP settings live in the environment; nothing is persisted here."""
    return {
        "success": True,
        "message": "SMTP settings received. Please update your .env file with these values and restart the server.",
        "note": "SMTP settings are stored in .env file. Update the file and restart the server for changes to take effect.",
    }


# ------------------------------
# Email templates
# ------------------------------
async def _all_templates(db: AsyncSession) -> List[EmailTemplate]:
    result = await db.execute(
        select(EmailTemplate).order_by(EmailTemplate.form_type, EmailTemplate.template_type)
    )
    return list(result.scalars().all())


@router.get("/email-templates")
async def list_email_templates(
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    """List templates, seeding the defaults the first time the table is read empty."""
    templates = await _all_templates(db)

    if not templates:
        logger.info("📝 Seeding default email templates")
        db.add_all([EmailTemplate(**template) for template in DEFAULT_EMAIL_TEMPLATES])
        await db.commit()
        templates = await _all_templates(db)

    return {
        "success": True,
        "data": [EmailTemplateResponse.model_validate(template) for template in templates],
    }


@router.post("/email-templates")
async def save_email_template(
    payload: EmailTemplateUpsert,
    current_admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(aget_db),
):
    if payload.id is not None:
        template = await db.get(EmailTemplate, payload.id)
        if not template:
            raise HTTPException(status_code=404, detail="Email template not found")
    else:
        result = await db.execute(
            select(EmailTemplate).where(
                EmailTemplate.form_type == payload.form_type,
                EmailTemplate.template_type == payload.template_type,
            )
        )
        template = result.scalar_one_or_none()
        if template is None:
            template = EmailTemplate(form_type=payload.form_type, template_type=payload.template_type)
            db.add(template)

    template.subject = payload.subject
    template.body = payload.body
    await db.commit()

    logger.info(f"📝 Email template saved: {template.form_type}/{template.template_type}")
    return {"success": True, "message": "Email template saved successfully"}
