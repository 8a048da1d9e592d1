"""Admin legal notices settings."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from legalnotices.i18n import LanguageCatalog
from legalnotices.services.legal_pages import PAGE_LABELS
from legalnotices.services.legal_settings import LegalSettings

from api.dependencies import Viewer, get_catalog, get_legal_settings, require_admin

logger = logging.getLogger(__name__)

router = APIRouter()

SETTINGS_LOCATION = "/admin/settings"
STORE_SUCCESS_MESSAGE = "Legal Notices settings have been saved."
STORE_ERROR_MESSAGE = (
    "An SQL error has occurred while storing Legal Notices settings. "
    "Please try again, and contact the administrator if the problem persists."
)


@router.get("")
async def get_settings_form(
    settings: LegalSettings = Depends(get_legal_settings),
    catalog: LanguageCatalog = Depends(get_catalog),
    user: Viewer = Depends(require_admin),
):
    _ = user
    return {
        "settings": settings.snapshot().model_dump(),
        "defaults": LegalSettings.defaults(),
        "languages": [{"id": language.id, "name": language.name} for language in catalog.languages()],
        "pages": [{"name": name, "label": label} for name, label in PAGE_LABELS.items()],
    }


@router.post("")
async def store_settings(
    values: dict[str, Any] = Body(...),
    settings: LegalSettings = Depends(get_legal_settings),
    user: Viewer = Depends(require_admin),
):
    settings.check(values)
    if await settings.store():
        logger.info("Legal Notices settings updated by %s", user.id)
        return {
            "status": "ok",
            "flash": {"success_detected": [STORE_SUCCESS_MESSAGE]},
            "location": SETTINGS_LOCATION,
            "settings": settings.snapshot().model_dump(),
        }
    return {
        "status": "error",
        "flash": {"error_detected": [STORE_ERROR_MESSAGE]},
        "location": SETTINGS_LOCATION,
        "entered_settings": values,
    }
