"""Seed legal pages and settings at plugin installation or upgrade."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from legalnotices.config import get_settings
from legalnotices.errors import SettingsUnavailableError
from legalnotices.i18n import LanguageCatalog
from legalnotices.services.legal_pages import LegalPages
from legalnotices.services.legal_settings import LegalSettings
from legalnotices.services.organization import load_organization_profile
from legalnotices.services.replacements import HostPatternProvider, LegalPagesPatternProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallReport:
    pages_changed: bool
    settings_changed: bool
    page_count: int

    def as_dict(self) -> dict:
        return {
            "pages_changed": self.pages_changed,
            "settings_changed": self.settings_changed,
            "page_count": self.page_count,
        }


async def install_defaults(
    session: AsyncSession,
    catalog: LanguageCatalog,
    *,
    force: bool = False,
) -> InstallReport:
    """Reset pages and settings to defaults, or only fill gaps unless ``force``."""
    profile = load_organization_profile()
    pages = LegalPages(
        session,
        catalog,
        base_provider=HostPatternProvider(profile, login_uri=get_settings().login_url),
        page_provider=LegalPagesPatternProvider(profile),
    )
    pages_changed = await pages.install_reset(force=force)

    settings = LegalSettings(session)
    if force:
        settings_changed = await settings.install_reset()
    else:
        if not await settings.load(reconcile=False):
            raise SettingsUnavailableError("Legal Notices settings cannot be loaded")
        settings_changed = await settings.reconcile()

    page_count = await pages.count()
    logger.info(
        "Legal Notices install done (force=%s, pages changed=%s, settings changed=%s)",
        force,
        pages_changed,
        settings_changed,
    )
    return InstallReport(
        pages_changed=pages_changed,
        settings_changed=settings_changed,
        page_count=page_count,
    )
