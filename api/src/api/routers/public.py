"""Public legal pages and consent banner configuration."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from legalnotices.i18n import LanguageCatalog
from legalnotices.services.legal_pages import PAGE_LABELS, PAGE_NAMES, LegalPages
from legalnotices.services.legal_settings import LegalSettings
from legalnotices.services.page_resolution import ResolutionOutcome, resolve_page

from api.dependencies import (
    Viewer,
    get_catalog,
    get_legal_pages,
    get_legal_settings,
    get_optional_viewer,
    viewer_language,
)

logger = logging.getLogger(__name__)

router = APIRouter()
pages_router = APIRouter()


@router.get("/consent")
async def get_consent_config(
    request: Request,
    settings: LegalSettings = Depends(get_legal_settings),
    catalog: LanguageCatalog = Depends(get_catalog),
    viewer: Viewer | None = Depends(get_optional_viewer),
):
    snapshot = settings.snapshot()
    lang = viewer_language(request, viewer, catalog)
    links = []
    if snapshot.publicpage_links:
        links = [
            {"name": name, "label": catalog.translate(msgid, lang), "url": f"/{name}"}
            for name, msgid in PAGE_LABELS.items()
            if settings.is_page_enabled(name)
        ]
    return {
        "enabled": snapshot.enable_cmp,
        "hide_accept_all": snapshot.hide_accept_all,
        "hide_decline_all": snapshot.hide_decline_all,
        "cookie_expiration": snapshot.cookie_expiration,
        "cookie_domain": snapshot.cookie_domain,
        "use_localstorage": snapshot.enable_localstorage,
        "privacy_policy_url": "/privacy-policy" if settings.is_page_enabled("privacy-policy") else None,
        "lang": lang,
        "links": links,
    }


@pages_router.get("/{name}")
async def view_page(
    name: str,
    request: Request,
    pages: LegalPages = Depends(get_legal_pages),
    settings: LegalSettings = Depends(get_legal_settings),
    catalog: LanguageCatalog = Depends(get_catalog),
    viewer: Viewer | None = Depends(get_optional_viewer),
):
    if name not in PAGE_NAMES:
        raise HTTPException(status_code=404, detail="Not found")

    lang = viewer_language(request, viewer, catalog)
    resolution = await resolve_page(pages, settings, name, lang=lang, logged_in=viewer is not None)
    if resolution.outcome is ResolutionOutcome.NOT_FOUND:
        logger.info("Legal page %s is not available, redirecting", name)
        return RedirectResponse(resolution.location, status_code=302)
    if resolution.outcome is ResolutionOutcome.REDIRECT_EXTERNAL:
        return RedirectResponse(resolution.location, status_code=301)
    return resolution.as_payload()
