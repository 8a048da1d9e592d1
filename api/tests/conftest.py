"""API test configuration."""

import pytest
from api.main import create_app
from api.middleware.auth import create_access_token
from httpx import ASGITransport, AsyncClient
from legalnotices.config import reset_settings_cache
from legalnotices.database import close_engine, get_engine
from legalnotices.models import Base

TEST_SECRET = "test-secret-key"


@pytest.fixture
async def database(tmp_path, monkeypatch):
    """Point the application at a throwaway SQLite file with the schema created."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("SKIP_MIGRATION_CHECK", "true")
    monkeypatch.setenv("LANGUAGES", '["en_US", "fr_FR"]')
    monkeypatch.setenv("DEFAULT_LANGUAGE", "en_US")
    monkeypatch.setenv("ORG_NAME", "Galette")
    monkeypatch.setenv("ORG_PHONE", "+00 0 00 00 00 00")
    monkeypatch.setenv("ORG_EMAIL", "contact@galette.eu")
    reset_settings_cache()
    await close_engine()
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await close_engine()
    reset_settings_cache()


@pytest.fixture
def app(database):
    return create_app()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _auth(role: str, lang: str | None = None) -> dict[str, str]:
    token = create_access_token(f"test-{role}-id", role, lang=lang)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(database):
    return _auth("admin")


@pytest.fixture
def staff_headers(database):
    return _auth("staff")


@pytest.fixture
def member_headers(database):
    return _auth("member", lang="fr_FR")
