from fastapi.testclient import TestClient

from app.main import create_app
from tests.conftest import ADMIN_EMAIL, FakeEmailService, make_settings


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running", "smtpConfigured": True}


def test_admin_email(client):
    assert client.get("/api/admin-email").json() == {"adminEmail": ADMIN_EMAIL}


def test_smtp_status_verified(client):
    body = client.get("/api/smtp-status").json()

    assert body["configured"] is True
    assert body["verified"] is True
    assert body["host"] == "smtp.acme-industries.com"


def test_smtp_status_not_configured(tmp_path):
    app = create_app(make_settings(tmp_path, SMTP_HOST=""), email_service=FakeEmailService(configured=False))

    with TestClient(app) as client:
        body = client.get("/api/smtp-status").json()

    assert body["configured"] is False
    assert body["verified"] is False


def test_unknown_api_path_is_json_404(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "API endpoint not found", "path": "/api/does-not-exist"}


def test_unexpected_error_is_reported_as_500(tmp_path):
    app = create_app(make_settings(tmp_path))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "kaboom"
    assert "RuntimeError" in body["details"]


def test_frontend_is_served_with_spa_fallback(tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<html>app</html>")
    (dist / "robots.txt").write_text("User-agent: *")
    app = create_app(make_settings(tmp_path, FRONTEND_DIST_DIR=str(dist)))

    with TestClient(app) as client:
        assert client.get("/robots.txt").text == "User-agent: *"
        assert client.get("/products/gaskets").text == "<html>app</html>"
        assert client.get("/api/nope").status_code == 404
