"""Shared fixtures: file-backed SQLite storage and a small language catalog."""

from datetime import date

import pytest
from legalnotices.database import enable_sqlite_savepoints
from legalnotices.i18n import LanguageCatalog
from legalnotices.models import Base
from legalnotices.services.legal_pages import LegalPages
from legalnotices.services.legal_settings import LegalSettings
from legalnotices.services.organization import OrganizationProfile
from legalnotices.services.replacements import HostPatternProvider, LegalPagesPatternProvider
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'legalnotices.db'}")
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def catalog():
    return LanguageCatalog({"en_US": "English", "fr_FR": "Français"}, default="en_US")


@pytest.fixture
def profile():
    return OrganizationProfile(
        name="Galette",
        slogan="Manage your members",
        address="1 rue du Logiciel\n75000 Paris",
        website="https://galette.eu",
        phone="+00 0 00 00 00 00",
        email="contact@galette.eu",
    )


@pytest.fixture
def base_provider(profile):
    return HostPatternProvider(profile, login_uri="/login", today=date(2026, 1, 2))


@pytest.fixture
def page_provider(profile):
    return LegalPagesPatternProvider(profile)


@pytest.fixture
def pages(session, catalog, base_provider, page_provider):
    return LegalPages(session, catalog, base_provider=base_provider, page_provider=page_provider)


@pytest.fixture
async def legal_settings(session):
    store = LegalSettings(session)
    await store.install_reset()
    await session.commit()
    return store
