"""Health and configuration status endpoints."""

from fastapi import APIRouter, Depends, Request

from app.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "message": "Server is running",
        "smtpConfigured": settings.smtp_configured,
    }


@router.get("/smtp-status")
async def smtp_status(request: Request, settings: Settings = Depends(get_settings)):
    """Whether SMTP is configured and, if so, whether the server accepts our credentials."""
    if not settings.smtp_configured:
        return {
            "configured": False,
            "verified": False,
            "message": "SMTP is not configured. Please set SMTP_HOST, SMTP_USER, and SMTP_PASSWORD in .env file",
        }

    verified = await request.app.state.email_service.verify_connection()
    return {
        "configured": True,
        "verified": verified,
        "host": settings.SMTP_HOST,
        "port": settings.SMTP_PORT,
        "fromEmail": settings.smtp_from_address,
        "message": "SMTP connection verified successfully" if verified else "SMTP connection verification failed",
    }


@router.get("/admin-email")
async def admin_email(settings: Settings = Depends(get_settings)):
    return {"adminEmail": settings.ADMIN_EMAIL}
