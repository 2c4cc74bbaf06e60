from datetime import datetime, timedelta

import pytest

from app.api.v1.endpoints.admin import date_window_start, resolve_sort_column
from app.core.security import create_jwt_token
from app.models.formsubmission import FormSubmission
from tests.conftest import ADMIN_PASSWORD, run_db


def seed_submissions(settings, rows):
    async def _insert(session):
        submissions = [FormSubmission(**row) for row in rows]
        session.add_all(submissions)
        await session.flush()
        return [submission.id for submission in submissions]

    return run_db(settings, _insert)


@pytest.fixture
def submissions(settings):
    now = datetime.utcnow()
    return seed_submissions(settings, [
        {"form_type": "quote", "name": "Alice", "email": "alice@acme-industries.com",
         "message": "Need 500 gaskets", "submitted_at": now - timedelta(minutes=5)},
        {"form_type": "contact", "name": "Bob", "email": "bob@acme-industries.com",
         "message": "Call me", "submitted_at": now - timedelta(days=3)},
        {"form_type": "certification", "name": "Carol", "email": "carol@acme-industries.com",
         "certification_type": "ISO 9001", "submitted_at": now - timedelta(days=60)},
    ])


def test_login_returns_token_and_user(client, admin_user):
    response = client.post("/api/admin/login", json={"username": "admin", "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["user"]["username"] == "admin"
    assert body["user"]["fullName"] == "Site Admin"
    assert "password_hash" not in body["user"]


def test_login_accepts_email_as_username(client, admin_user):
    response = client.post("/api/admin/login", json={"username": "admin@laxmi-leads.com", "password": ADMIN_PASSWORD})

    assert response.status_code == 200


def test_login_with_wrong_password(client, admin_user):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid username or password"}


def test_login_with_unknown_user(client, admin_user):
    response = client.post("/api/admin/login", json={"username": "ghost", "password": ADMIN_PASSWORD})

    assert response.status_code == 401


def test_login_requires_both_fields(client):
    response = client.post("/api/admin/login", json={"username": "admin"})

    assert response.status_code == 400
    assert response.json()["message"] == "Username and password are required"


def test_me_returns_current_admin(client, auth_headers):
    response = client.get("/api/admin/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "admin@laxmi-leads.com"
    assert response.json()["user"]["last_login"] is not None


def test_token_from_cookie_is_accepted(client, auth_headers):
    token = auth_headers["Authorization"].split(" ", 1)[1]
    client.cookies.set("auth_token", token)

    response = client.get("/api/admin/me")

    assert response.status_code == 200


@pytest.mark.parametrize("path", ["/api/admin/me", "/api/admin/submissions", "/api/admin/stats", "/api/admin/seo"])
def test_admin_routes_require_a_token(client, path):
    response = client.get(path)

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access token required"}


def test_invalid_token_is_rejected(client):
    response = client.get("/api/admin/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_token_for_missing_admin_is_rejected(client, settings):
    token = create_jwt_token({"sub": "999"}, settings)

    response = client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "User not found or inactive"


def test_list_submissions_newest_first(client, auth_headers, submissions):
    response = client.get("/api/admin/submissions", headers=auth_headers)

    body = response.json()
    assert response.status_code == 200
    assert [row["name"] for row in body["data"]] == ["Alice", "Bob", "Carol"]
    assert body["pagination"] == {"page": 1, "limit": 50, "total": 3, "totalPages": 1}


def test_list_submissions_pagination(client, auth_headers, submissions):
    response = client.get("/api/admin/submissions?page=2&limit=2", headers=auth_headers)

    body = response.json()
    assert [row["name"] for row in body["data"]] == ["Carol"]
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}


def test_list_submissions_rejects_bad_page(client, auth_headers):
    response = client.get("/api/admin/submissions?page=0", headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_list_submissions_filters(client, auth_headers, submissions):
    by_type = client.get("/api/admin/submissions?formType=contact", headers=auth_headers).json()
    by_search = client.get("/api/admin/submissions?search=gaskets", headers=auth_headers).json()
    by_week = client.get("/api/admin/submissions?dateFilter=week", headers=auth_headers).json()

    assert [row["name"] for row in by_type["data"]] == ["Bob"]
    assert [row["name"] for row in by_search["data"]] == ["Alice"]
    assert [row["name"] for row in by_week["data"]] == ["Alice", "Bob"]
    assert by_week["pagination"]["total"] == 2


def test_list_submissions_sorting(client, auth_headers, submissions):
    response = client.get("/api/admin/submissions?sortBy=name&sortOrder=ASC", headers=auth_headers)

    assert [row["name"] for row in response.json()["data"]] == ["Alice", "Bob", "Carol"]

    response = client.get("/api/admin/submissions?sortBy=name&sortOrder=DESC", headers=auth_headers)

    assert [row["name"] for row in response.json()["data"]] == ["Carol", "Bob", "Alice"]


def test_unknown_sort_column_falls_back_to_submitted_at(client, auth_headers, submissions):
    response = client.get("/api/admin/submissions?sortBy=id;DROP TABLE form_submissions", headers=auth_headers)

    assert response.status_code == 200
    assert [row["name"] for row in response.json()["data"]] == ["Alice", "Bob", "Carol"]
    assert resolve_sort_column("DROP TABLE") is FormSubmission.submitted_at
    assert resolve_sort_column("email") is FormSubmission.email


def test_date_window_start():
    now = datetime(2026, 10, 19, 15, 30)

    assert date_window_start("today", now) == datetime(2026, 10, 19)
    assert date_window_start("week", now) == datetime(2026, 10, 12, 15, 30)
    assert date_window_start("month", now) == datetime(2026, 10, 1)
    assert date_window_start("all", now) is None


def test_get_and_delete_submission(client, auth_headers, submissions):
    first_id = submissions[0]

    response = client.get(f"/api/admin/submissions/{first_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Alice"

    response = client.delete(f"/api/admin/submissions/{first_id}", headers=auth_headers)
    assert response.json() == {"success": True, "message": "Submission deleted successfully"}

    assert client.get(f"/api/admin/submissions/{first_id}", headers=auth_headers).status_code == 404
    response = client.delete(f"/api/admin/submissions/{first_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Submission not found"


def test_stats(client, auth_headers, submissions):
    response = client.get("/api/admin/stats", headers=auth_headers)

    stats = response.json()["stats"]
    assert stats["total"] == 3
    assert stats["today"] <= 1
    assert stats["thisWeek"] == 2
    assert {item["form_type"]: item["count"] for item in stats["byType"]} == {
        "certification": 1,
        "contact": 1,
        "quote": 1,
    }


def test_smtp_settings_are_read_only(client, auth_headers):
    response = client.get("/api/admin/smtp-settings", headers=auth_headers)

    body = response.json()
    assert body["configured"] is True
    assert body["host"] == "smtp.acme-industries.com"
    assert "password" not in body

    response = client.post("/api/admin/smtp-settings", json={"host": "smtp.other.com"}, headers=auth_headers)
    assert response.json()["success"] is True
    assert ".env" in response.json()["note"]

    assert client.get("/api/admin/smtp-settings", headers=auth_headers).json()["host"] == "smtp.acme-industries.com"
