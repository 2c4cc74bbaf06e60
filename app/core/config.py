import logging
from dotenv import load_dotenv
from fastapi import Request
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import List, Optional

# Load environment variables from .env file
load_dotenv(".env", override=False)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Class to store all the settings of the lead-capture backend.

    Built once at process start and handed to every component that needs it.
    Instances are frozen so nothing can mutate configuration at request time.
    """

    # ------------------------------
    # Environment
    # ------------------------------
    ENVIRONMENT: str = Field(default="development")

    # ------------------------------
    # Database
    # ------------------------------
    DATABASE_URL: Optional[str] = Field(default=None)
    DB_DRIVER: str = Field(default="postgresql+asyncpg")
    DB_HOST: str = Field(default="localhost")
    DB_PORT: Optional[int] = Field(default=None)
    DB_USER: str = Field(default="postgres")
    DB_PASSWORD: str = Field(default="")
    DB_NAME: str = Field(default="laxmielectronics")
    DB_POOL_SIZE: int = Field(default=10)
    DB_ECHO: bool = Field(default=False)

    # ------------------------------
    # SMTP - Optional (emails are skipped when missing)
    # ------------------------------
    SMTP_HOST: str = Field(default="")
    SMTP_PORT: int = Field(default=587)
    SMTP_SECURE: bool = Field(default=False)
    SMTP_USER: str = Field(default="")
    SMTP_PASSWORD: str = Field(default="")
    SMTP_FROM_NAME: str = Field(default="Laxmi Electronics")
    SMTP_FROM_EMAIL: str = Field(default="")
    SMTP_VALIDATE_CERTS: bool = Field(default=False)
    SMTP_TIMEOUT: float = Field(default=30.0)

    # ------------------------------
    # Notification routing
    # ------------------------------
    ADMIN_EMAIL: str = Field(default="marketing@laxmielectronics.com")
    DEV_EMAIL: str = Field(default="")
    PLACEHOLDER_EMAIL: str = Field(default="no-email@laxmielectronics.com")

    # ------------------------------
    # Auth
    # ------------------------------
    SECRET_KEY: str = Field(default="dev-secret-key")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=24 * 60)
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="admin123")

    # ------------------------------
    # reCAPTCHA - Optional
    # ------------------------------
    RECAPTCHA_SECRET_KEY: str = Field(default="")
    RECAPTCHA_MIN_SCORE: float = Field(default=0.5)
    RECAPTCHA_VERIFY_URL: str = Field(default="https://www.google.com/recaptcha/api/siteverify")

    # ------------------------------
    # Site
    # ------------------------------
    SITE_NAME: str = Field(default="Laxmi Electronics")
    SITE_URL: str = Field(default="https://www.laxmielectronics.com")
    ALLOWED_ORIGINS: str = Field(default="")
    UPLOADS_DIR: str = Field(default="uploads")
    FRONTEND_DIST_DIR: str = Field(default="")
    RATE_LIMIT_ENABLED: bool = Field(default=True)

    # ------------------------------
    # Computed Fields
    # ------------------------------
    @computed_field
    @property
    def database_url(self) -> str:
        """SQLAlchemy URL, either given verbatim or assembled from the DB_* parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            self.DB_DRIVER,
            username=self.DB_USER or None,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)

    @computed_field
    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASSWORD)

    @computed_field
    @property
    def smtp_from_address(self) -> str:
        return self.SMTP_FROM_EMAIL or self.SMTP_USER

    @computed_field
    @property
    def dev_alert_email(self) -> str:
        return self.DEV_EMAIL or self.ADMIN_EMAIL

    @computed_field
    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        """Configuration for the settings class."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        frozen = True


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was created with."""
    return request.app.state.settings
