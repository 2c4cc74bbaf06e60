from fastapi.testclient import TestClient

from app.core.ratelimit import limiter
from app.main import create_app
from tests.conftest import FakeEmailService, make_settings


def test_login_is_rate_limited(tmp_path):
    app = create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=True), email_service=FakeEmailService())

    try:
        with TestClient(app) as client:
            statuses = [
                client.post("/api/admin/login", json={"username": "admin", "password": "guess"}).status_code
                for _ in range(11)
            ]
    finally:
        limiter.reset()

    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429


def test_latest_app_decides_rate_limiting(tmp_path):
    create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=True))
    assert limiter.enabled is True

    app = create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=False))
    assert limiter.enabled is False

    with TestClient(app) as client:
        statuses = {
            client.post("/api/admin/login", json={"username": "admin", "password": "guess"}).status_code
            for _ in range(12)
        }

    assert statuses == {401}
