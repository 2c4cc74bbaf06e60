from sqlalchemy import select

from app.constants.seo_defaults import DEFAULT_SEO_PAGES
from app.core.database import DatabaseSessionManager
from app.core.security import verify_password
from app.models.adminuser import AdminUser
from app.models.seometadata import SEOMetadata
from scripts.init_admin import create_admin_if_missing
from scripts.init_seo import init_seo
from scripts.reset_admin import reset_admin_password
from tests.conftest import make_settings, run_db


def _admins(settings):
    async def _load(session):
        result = await session.execute(select(AdminUser))
        return result.scalars().all()

    return run_db(settings, _load)


def test_create_admin_only_once(tmp_path):
    settings = make_settings(tmp_path)

    assert run_db(settings, lambda db: create_admin_if_missing(db, settings)) is True
    assert run_db(settings, lambda db: create_admin_if_missing(db, settings)) is False

    admins = _admins(settings)
    assert len(admins) == 1
    assert admins[0].username == "admin"
    assert admins[0].email == settings.ADMIN_EMAIL
    assert verify_password(settings.ADMIN_PASSWORD, admins[0].password_hash)


def test_reset_restores_password_and_reactivates(tmp_path):
    settings = make_settings(tmp_path)
    run_db(settings, lambda db: create_admin_if_missing(db, settings))

    async def _lock_out(session):
        admin = (await session.execute(select(AdminUser))).scalar_one()
        admin.password_hash = "forgotten"
        admin.is_active = False

    run_db(settings, _lock_out)

    rotated = make_settings(tmp_path, ADMIN_PASSWORD="n3w-pass")
    run_db(rotated, lambda db: reset_admin_password(db, rotated))

    admin = _admins(settings)[0]
    assert admin.is_active is True
    assert verify_password("n3w-pass", admin.password_hash)


def test_reset_creates_missing_admin(tmp_path):
    settings = make_settings(tmp_path)

    run_db(settings, lambda db: reset_admin_password(db, settings))

    assert len(_admins(settings)) == 1


async def test_init_seo_script(tmp_path, monkeypatch):
    settings = make_settings(tmp_path)
    monkeypatch.setattr("scripts.init_seo.Settings", lambda: settings)

    await init_seo()
    await init_seo()

    manager = DatabaseSessionManager(settings)
    try:
        async with manager.get_session() as session:
            rows = (await session.execute(select(SEOMetadata))).scalars().all()
    finally:
        await manager.close()

    assert len(rows) == len(DEFAULT_SEO_PAGES)
