"""Admin legal page editing."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from legalnotices.i18n import LanguageCatalog
from legalnotices.models import LegalPage
from legalnotices.services.legal_pages import DEFAULT_NAME, LegalPages
from pydantic import BaseModel

from api.dependencies import (
    Viewer,
    get_catalog,
    get_legal_pages,
    require_staff,
    viewer_language,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ChangePageRequest(BaseModel):
    sel_lang: str = ""
    sel_page: str = ""


class EditPageRequest(BaseModel):
    page_name: str
    page_lang: str
    page_body: str = ""
    page_url: str = ""


def _page_location(lang: str, name: str) -> str:
    return f"/admin/pages/{lang}/{name}"


def _serialize_page(page: LegalPage, pages: LegalPages) -> dict:
    return {
        "id": page.id,
        "name": page.name,
        "lang": page.lang,
        "label": page.label,
        "body": page.body,
        "url": page.url,
        "last_update": page.last_update.isoformat() if page.last_update else None,
        "translated": pages.is_translated(page.id),
    }


async def _list_payload(pages: LegalPages, catalog: LanguageCatalog, lang: str, name: str) -> dict:
    page = await pages.get(name, lang)
    if page is None:
        raise HTTPException(status_code=404, detail="Legal page not found")
    names = await pages.list_names(page.lang)
    return {
        "lang": page.lang,
        "name": page.name,
        "languages": [{"id": language.id, "name": language.name} for language in catalog.languages()],
        "pages": [{"name": page_name, "label": label} for page_name, label in names],
        "page": _serialize_page(page, pages),
    }


@router.get("")
async def list_pages(
    request: Request,
    lang: str | None = None,
    name: str | None = None,
    pages: LegalPages = Depends(get_legal_pages),
    catalog: LanguageCatalog = Depends(get_catalog),
    user: Viewer = Depends(require_staff),
):
    target_lang = lang or viewer_language(request, user, catalog)
    return await _list_payload(pages, catalog, target_lang, name or DEFAULT_NAME)


@router.get("/legend")
async def get_legend(
    pages: LegalPages = Depends(get_legal_pages),
    user: Viewer = Depends(require_staff),
):
    _ = user
    return pages.legend()


@router.get("/{lang}/{name}")
async def show_page(
    lang: str,
    name: str,
    pages: LegalPages = Depends(get_legal_pages),
    catalog: LanguageCatalog = Depends(get_catalog),
    user: Viewer = Depends(require_staff),
):
    _ = user
    return await _list_payload(pages, catalog, lang, name)


@router.post("/change")
async def change_page(
    req: ChangePageRequest,
    request: Request,
    catalog: LanguageCatalog = Depends(get_catalog),
    user: Viewer = Depends(require_staff),
):
    lang = req.sel_lang.strip() or viewer_language(request, user, catalog)
    name = req.sel_page.strip() or DEFAULT_NAME
    return RedirectResponse(_page_location(lang, name), status_code=303)


@router.post("")
async def edit_page(
    req: EditPageRequest,
    pages: LegalPages = Depends(get_legal_pages),
    user: Viewer = Depends(require_staff),
):
    page = await pages.get(req.page_name, req.page_lang)
    if page is None:
        raise HTTPException(status_code=404, detail="Legal page not found")

    location = _page_location(page.lang, page.name)
    label = page.label
    if await pages.store(page.name, page.lang, req.page_body, req.page_url):
        logger.info("Legal page %s (%s) updated by %s", page.name, page.lang, user.id)
        return {
            "status": "ok",
            "flash": {"success_detected": [f'The "{label}" page has been successfully modified.']},
            "location": location,
        }
    return {
        "status": "error",
        "flash": {"error_detected": [f'The "{label}" page has not been modified!']},
        "location": location,
    }
