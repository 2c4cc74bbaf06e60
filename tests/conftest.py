import asyncio
import json
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.constants.constants import SMTP_NOT_CONFIGURED
from app.core.config import Settings
from app.core.database import DatabaseSessionManager
from app.core.security import hash_password
from app.main import create_app
from app.models.adminuser import AdminUser

ADMIN_EMAIL = "marketing@laxmi-leads.com"
DEV_EMAIL = "dev@laxmi-leads.com"
ADMIN_PASSWORD = "s3cret-pass"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "ENVIRONMENT": "test",
        "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'leads.db'}",
        "SMTP_HOST": "smtp.acme-industries.com",
        "SMTP_PORT": 587,
        "SMTP_USER": "mailer@acme-industries.com",
        "SMTP_PASSWORD": "smtp-password",
        "SMTP_FROM_NAME": "Laxmi Electronics",
        "SMTP_FROM_EMAIL": "",
        "ADMIN_EMAIL": ADMIN_EMAIL,
        "DEV_EMAIL": DEV_EMAIL,
        "SECRET_KEY": "test-secret-key",
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "RECAPTCHA_SECRET_KEY": "",
        "SITE_NAME": "Laxmi Electronics",
        "SITE_URL": "https://www.laxmielectronics.com",
        "ALLOWED_ORIGINS": "",
        "UPLOADS_DIR": str(tmp_path / "uploads"),
        "FRONTEND_DIST_DIR": "",
        "RATE_LIMIT_ENABLED": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeEmailService:
    """Records every send; addresses in fail_for get a failed result."""

    def __init__(self, configured=True, fail_for=()):
        self.configured = configured
        self.fail_for = set(fail_for)
        self.sent = []

    @property
    def is_configured(self):
        return self.configured

    async def send_email(self, to, subject, html, attachments=None, bcc=None):
        self.sent.append({
            "to": to,
            "subject": subject,
            "html": html,
            "attachments": list(attachments or []),
        })
        if not self.configured:
            return {"success": False, "error": SMTP_NOT_CONFIGURED}
        if to in self.fail_for:
            return {"success": False, "error": "550 Mailbox unavailable", "message": "Failed to send email"}
        return {"success": True, "messageId": f"<{len(self.sent)}@test>", "message": "Email sent successfully"}

    async def verify_connection(self):
        return self.configured

    def sent_to(self, address):
        return [message for message in self.sent if message["to"] == address]


class UnreachableDatabase:
    """Session manager whose database refuses every connection."""

    def __init__(self):
        self.attempts = 0

    async def init(self):
        return False

    @asynccontextmanager
    async def get_session(self):
        self.attempts += 1
        raise OperationalError(
            "INSERT INTO form_submissions",
            {},
            ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)"),
        )
        yield  # pragma: no cover

    async def close(self):
        pass


def run_db(settings, work):
    """Run `work(session)` against the test database from synchronous test code."""
    async def _run():
        manager = DatabaseSessionManager(settings)
        try:
            async with manager.get_session() as session:
                return await work(session)
        finally:
            await manager.close()

    return asyncio.run(_run())


def submission_payload(form_type="quote", form_data=None, **extra):
    payload = {
        "formType": form_type,
        "formData": form_data if form_data is not None else {
            "name": "Jane Doe",
            "email": "jane@x.com",
            "phone": "1234567",
            "message": "need parts",
        },
        "adminEmail": {
            "to": "attacker@evil-corp.com",
            "subject": "New Quote Request",
            "html": "<p>New quote from Jane Doe</p>",
        },
        "customerEmail": {
            "to": "jane@x.com",
            "subject": "Thank you for your request",
            "html": "<p>We will be in touch.</p>",
        },
    }
    payload.update(extra)
    return payload


def multipart_fields(payload):
    """The multipart encoding the frontend uses: nested objects as JSON strings."""
    fields = {}
    for key, value in payload.items():
        fields[key] = json.dumps(value) if isinstance(value, (dict, list)) else value
    return fields


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def client(settings, email_service):
    app = create_app(settings, email_service=email_service)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_user(settings):
    async def _create(session):
        admin = AdminUser(
            username="admin",
            email="admin@laxmi-leads.com",
            password_hash=hash_password(ADMIN_PASSWORD),
            full_name="Site Admin",
        )
        session.add(admin)
        await session.flush()
        return admin.id

    return run_db(settings, _create)


@pytest.fixture
def auth_headers(client, admin_user):
    response = client.post("/api/admin/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
