"""Decide what a visitor gets for a public legal page."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from legalnotices.services.legal_pages import LegalPages
from legalnotices.services.legal_settings import LegalSettings

logger = logging.getLogger(__name__)

PAGE_NOT_FOUND_LOCATION = "/page-not-found"


class ResolutionOutcome(str, Enum):
    RENDER = "render"
    REDIRECT_EXTERNAL = "redirect_external"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PageResolution:
    outcome: ResolutionOutcome
    name: str
    location: str | None = None
    label: str = ""
    body: str = ""
    lang: str = ""
    last_update: str = ""
    translated: bool = True
    is_public: bool = False

    def as_payload(self) -> dict:
        payload = {
            "name": self.name,
            "page_title": self.label,
            "body": self.body,
            "lang": self.lang,
            "last_update": self.last_update,
            "translated": self.translated,
        }
        if self.is_public:
            payload["is_public"] = True
        return payload


async def resolve_page(
    pages: LegalPages,
    settings: LegalSettings,
    name: str,
    *,
    lang: str | None,
    logged_in: bool,
) -> PageResolution:
    """Resolve ``name`` for a visitor reading in ``lang``.

    Untranslated pages are served in the configured fallback language.
    Disabled pages resolve to not found, pages with an external URL to a
    redirect, anything else to the rendered body.
    """
    page = await pages.get(name, lang)
    if page is None:
        return PageResolution(outcome=ResolutionOutcome.NOT_FOUND, name=name, location=PAGE_NOT_FOUND_LOCATION)

    translated = True
    fallback_lang = settings.get_fallback_language()
    if not pages.is_translated(page.id) and page.lang != fallback_lang:
        translated = False
        fallback_page = await pages.get(name, fallback_lang)
        if fallback_page is not None:
            page = fallback_page

    if not settings.is_page_enabled(page.name):
        logger.info("Page %s is disabled, refusing to display it", page.name)
        return PageResolution(outcome=ResolutionOutcome.NOT_FOUND, name=name, location=PAGE_NOT_FOUND_LOCATION)

    if page.url:
        return PageResolution(
            outcome=ResolutionOutcome.REDIRECT_EXTERNAL,
            name=page.name,
            location=page.url,
            label=page.label,
            lang=page.lang,
            translated=translated,
        )

    last_update = page.last_update.strftime("%Y-%m-%d") if page.last_update else ""
    return PageResolution(
        outcome=ResolutionOutcome.RENDER,
        name=page.name,
        label=page.label,
        body=pages.render(page),
        lang=page.lang,
        last_update=last_update,
        translated=translated,
        is_public=not logged_in,
    )
