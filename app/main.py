import logging
import os
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.endpoints.admin import router as admin_router
from app.api.v1.endpoints.forms import router as forms_router
from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.seo import router as seo_router
from app.core.config import Settings
from app.core.database import DatabaseSessionManager
from app.core.ratelimit import limiter
from app.services.RecaptchaVerifier import RecaptchaVerifier
from app.services.SMTPEmailService import SMTPEmailService
from app.services.SubmissionIngestion import SubmissionIngestionService
from app.utils.submissions.normalize_submission import SubmissionRejected

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""
    settings = app.state.settings

    try:
        logger.info(f"🚀 Starting {settings.SITE_NAME} lead-capture API ({settings.ENVIRONMENT})...")

        logger.info("🔌 Initializing database...")
        if await app.state.session_manager.init():
            logger.info("✅ Database ready")
        else:
            logger.warning("⚠️ Database unavailable at startup; submissions will still be emailed and tables created on first use")

        if settings.smtp_configured:
            logger.info(f"📧 SMTP configured: {settings.SMTP_HOST}:{settings.SMTP_PORT}")
        else:
            logger.warning("⚠️ SMTP not configured. Emails will not be sent.")

        if not app.state.recaptcha.enabled:
            logger.warning("⚠️ RECAPTCHA_SECRET_KEY not set, reCAPTCHA tokens are not verified")
    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        logger.info("🏁 Application startup complete")
        yield
    finally:
        try:
            logger.info("🛑 Beginning application shutdown...")
            await app.state.ingestion_service.drain_background_tasks()

            logger.info("🔌 Closing database connections...")
            await app.state.session_manager.close()
            logger.info("✅ Database connections closed cleanly")
        except Exception as e:
            logger.error(f"⚠️ Error during shutdown: {str(e)}")
            raise
        finally:
            logger.info("👋 Application shutdown complete")


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(SubmissionRejected)
    async def submission_rejected_handler(request: Request, exc: SubmissionRejected):
        logger.warning(f"🚫 Submission rejected: {exc.message}")
        return JSONResponse(status_code=400, content={"success": False, "message": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Validation Error: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": "Invalid request data",
                "errors": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {str(exc)}")
        content = {
            "success": False,
            "message": "Internal server error",
            "error": str(exc),
        }
        if not app.state.settings.is_production:
            content["details"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=500, content=content)

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances that JSON cannot encode
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


def mount_frontend(app: FastAPI, dist_dir: str):
    """Serve the built single-page frontend, falling back to index.html for client routes."""
    dist_dir = os.path.abspath(dist_dir)
    index_file = os.path.join(dist_dir, "index.html")

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_frontend(full_path: str):
        candidate = os.path.abspath(os.path.join(dist_dir, full_path))
        if full_path and candidate.startswith(dist_dir + os.sep) and os.path.isfile(candidate):
            return FileResponse(candidate)
        return FileResponse(index_file)

    logger.info(f"🖥️ Serving frontend from {dist_dir}")


def create_app(
    settings: Optional[Settings] = None,
    email_service: Optional[SMTPEmailService] = None,
    session_manager: Optional[DatabaseSessionManager] = None,
    recaptcha: Optional[RecaptchaVerifier] = None,
) -> FastAPI:
    """Build the application. Every component receives the same immutable settings."""
    settings = settings or Settings()

    app = FastAPI(
        title=f"{settings.SITE_NAME} API",
        description="Lead capture, admin panel and SEO metadata for the marketing site",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_manager = session_manager or DatabaseSessionManager(settings)
    app.state.email_service = email_service or SMTPEmailService(settings)
    app.state.recaptcha = recaptcha or RecaptchaVerifier(settings)
    app.state.ingestion_service = SubmissionIngestionService(
        settings,
        app.state.session_manager,
        app.state.email_service,
        app.state.recaptcha,
    )

    if limiter.enabled != settings.RATE_LIMIT_ENABLED:
        logger.info(f"🚦 Rate limiting {'enabled' if settings.RATE_LIMIT_ENABLED else 'disabled'} for this process")
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Request: {request.method} {request.url.path} ({request.headers.get('content-type', '-')})")
        response = await call_next(request)
        logger.info(f"Response status: {response.status_code}")
        return response

    # CORS Configuration
    allowed_origins = settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=bool(allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(forms_router, prefix="/api", tags=["Forms"])
    app.include_router(health_router, prefix="/api", tags=["Health Check"])
    app.include_router(seo_router, prefix="/api", tags=["SEO"])
    app.include_router(admin_router, prefix="/api", tags=["Admin"])

    @app.api_route(
        "/api/{unmatched:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def api_not_found(request: Request, unmatched: str):
        return JSONResponse(
            status_code=404,
            content={"error": "API endpoint not found", "path": request.url.path},
        )

    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

    if settings.FRONTEND_DIST_DIR and os.path.isfile(os.path.join(settings.FRONTEND_DIST_DIR, "index.html")):
        mount_frontend(app, settings.FRONTEND_DIST_DIR)

    logger.info(f"✅ Loaded {len(app.routes)} routes")
    return app


app = create_app()
