"""Install hook: seed legal pages and settings."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from legalnotices.errors import SettingsUnavailableError
from legalnotices.i18n import LanguageCatalog
from legalnotices.services.install import install_defaults
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import Viewer, get_catalog, get_db, require_admin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/install")
async def install(
    force: bool = False,
    db: AsyncSession = Depends(get_db),
    catalog: LanguageCatalog = Depends(get_catalog),
    user: Viewer = Depends(require_admin),
):
    try:
        report = await install_defaults(db, catalog, force=force)
    except SettingsUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        logger.error("Legal Notices install failed: %s", exc)
        raise HTTPException(status_code=500, detail="Unable to initialize Legal Notices data") from exc
    logger.info("Legal Notices install triggered by %s (force=%s)", user.id, force)
    return {"status": "ok", **report.as_dict()}
