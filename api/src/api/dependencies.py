"""FastAPI dependency injection."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from legalnotices.config import get_settings
from legalnotices.database import get_session_factory
from legalnotices.errors import SettingsUnavailableError
from legalnotices.i18n import LanguageCatalog, get_language_catalog
from legalnotices.services.legal_pages import LegalPages
from legalnotices.services.legal_settings import LegalSettings
from legalnotices.services.organization import load_organization_profile
from legalnotices.services.replacements import HostPatternProvider, LegalPagesPatternProvider
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "legalnotices_token"
ROLE_LEVELS = {
    "member": 10,
    "staff": 20,
    "admin": 30,
}


@dataclass(frozen=True)
class Viewer:
    """Authenticated caller as described by the host application's token."""

    id: str
    role: str
    lang: str | None = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        token = auth[7:].strip()
        return token or None
    return None


def _extract_cookie_token(request: Request) -> str | None:
    cookie_token = request.cookies.get(AUTH_COOKIE_NAME, "").strip()
    return cookie_token or None


def _viewer_from_payload(payload: dict) -> Viewer | None:
    user_id = str(payload.get("sub", "")).strip()
    role = str(payload.get("role", "")).strip().lower()
    if not user_id or role not in ROLE_LEVELS:
        return None
    lang = str(payload.get("lang", "")).strip() or None
    return Viewer(id=user_id, role=role, lang=lang)


def get_current_viewer(request: Request) -> Viewer:
    settings = get_settings()
    raw_token = _extract_bearer_token(request) or _extract_cookie_token(request)
    if not raw_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    try:
        payload = jwt.decode(raw_token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    viewer = _viewer_from_payload(payload)
    if viewer is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token claims")
    return viewer


def get_optional_viewer(request: Request) -> Viewer | None:
    raw_token = _extract_bearer_token(request) or _extract_cookie_token(request)
    if not raw_token:
        return None
    try:
        settings = get_settings()
        payload = jwt.decode(raw_token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    return _viewer_from_payload(payload)


def _require_level(viewer: Viewer, required: str) -> Viewer:
    if ROLE_LEVELS[viewer.role] < ROLE_LEVELS[required]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient role permissions",
        )
    return viewer


def require_staff(viewer: Viewer = Depends(get_current_viewer)) -> Viewer:
    return _require_level(viewer, "staff")


def require_admin(viewer: Viewer = Depends(get_current_viewer)) -> Viewer:
    return _require_level(viewer, "admin")


def get_catalog() -> LanguageCatalog:
    return get_language_catalog()


def _accept_language(request: Request, catalog: LanguageCatalog) -> str | None:
    header = request.headers.get("Accept-Language", "")
    for part in header.split(","):
        tag = part.split(";")[0].strip().replace("-", "_")
        if not tag:
            continue
        if catalog.is_known(tag):
            return tag
        prefix = tag.split("_")[0].lower()
        for lang_id in catalog.ids():
            if lang_id.lower().startswith(f"{prefix}_"):
                return lang_id
    return None


def viewer_language(
    request: Request,
    viewer: Viewer | None,
    catalog: LanguageCatalog,
) -> str:
    """Language for this request: ``?lang=``, token claim, Accept-Language, default."""
    for candidate in (request.query_params.get("lang"), viewer.lang if viewer else None):
        if catalog.is_known(candidate):
            return str(candidate)
    return _accept_language(request, catalog) or catalog.default


async def get_legal_pages(
    db: AsyncSession = Depends(get_db),
    catalog: LanguageCatalog = Depends(get_catalog),
) -> LegalPages:
    settings = get_settings()
    profile = load_organization_profile()
    return await LegalPages.open(
        db,
        catalog,
        base_provider=HostPatternProvider(profile, login_uri=settings.login_url),
        page_provider=LegalPagesPatternProvider(profile),
    )


async def get_legal_settings(db: AsyncSession = Depends(get_db)) -> LegalSettings:
    try:
        return await LegalSettings.open(db)
    except SettingsUnavailableError as exc:
        logger.error("Legal Notices settings unavailable: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
