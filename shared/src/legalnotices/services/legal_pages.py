"""Legal page storage: one row per (page name, language)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, insert, or_, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legalnotices.i18n import LanguageCatalog
from legalnotices.models import LegalPage
from legalnotices.services.replacements import PatternProvider, legal_pages_legend, merge_providers

logger = logging.getLogger(__name__)

DEFAULT_NAME = "legal-information"

# name -> label msgid, in display order
PAGE_LABELS: dict[str, str] = {
    "legal-information": "Legal Information",
    "terms-of-service": "Terms of Service",
    "privacy-policy": "Privacy Policy",
}
PAGE_NAMES = tuple(PAGE_LABELS)

# What the WYSIWYG editor leaves behind when emptied.
EMPTY_EDITOR_BODIES = frozenset({"<br>", "<p><br></p>"})


@dataclass(frozen=True)
class DefaultPage:
    name: str
    lang: str
    label: str
    body: str = ""
    url: str = ""

    def as_row(self, now: datetime, **extra: Any) -> dict[str, Any]:
        row = {
            "name": self.name,
            "lang": self.lang,
            "label": self.label,
            "body": self.body,
            "url": self.url,
            "last_update": now,
        }
        row.update(extra)
        return row


def default_pages(catalog: LanguageCatalog, lang: str) -> list[DefaultPage]:
    return [
        DefaultPage(name=name, lang=lang, label=catalog.translate(msgid, lang))
        for name, msgid in PAGE_LABELS.items()
    ]


def seed_defaults(catalog: LanguageCatalog, languages: list[str] | None = None) -> list[DefaultPage]:
    """Default pages for every language (all catalog languages when omitted)."""
    pages: list[DefaultPage] = []
    for lang in languages if languages is not None else catalog.ids():
        pages.extend(default_pages(catalog, lang))
    return pages


def normalize_body(body: str) -> str:
    return "" if body.strip() in EMPTY_EDITOR_BODIES else body


class LegalPages:
    """Page repository with lazy default creation and marker rendering.

    ``base_provider`` supplies the host markers, ``page_provider`` the
    legal pages specific ones; both are merged for rendering.
    """

    def __init__(
        self,
        session: AsyncSession,
        catalog: LanguageCatalog,
        *,
        base_provider: PatternProvider,
        page_provider: PatternProvider,
    ) -> None:
        self.session = session
        self.catalog = catalog
        self.base_provider = base_provider
        self.page_provider = page_provider
        self.provider = merge_providers(base_provider, page_provider)
        self._translated: set[int] = set()

    @classmethod
    async def open(
        cls,
        session: AsyncSession,
        catalog: LanguageCatalog,
        *,
        base_provider: PatternProvider,
        page_provider: PatternProvider,
    ) -> LegalPages:
        """Repository with missing pages inserted and translation state loaded."""
        pages = cls(session, catalog, base_provider=base_provider, page_provider=page_provider)
        await pages.reconcile()
        await pages.refresh_translated()
        return pages

    def default_pages(self, lang: str) -> list[DefaultPage]:
        return default_pages(self.catalog, lang)

    def all_defaults(self) -> list[DefaultPage]:
        return seed_defaults(self.catalog)

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(LegalPage.id)))
        return int(result.scalar() or 0)

    async def _existing_keys(self) -> set[tuple[str, str]]:
        result = await self.session.execute(select(LegalPage.name, LegalPage.lang))
        return {(row.name, row.lang) for row in result.all()}

    async def reconcile(self) -> bool:
        """Insert default rows for every missing (name, lang) pair.

        A concurrent reconciliation inserting the same rows is absorbed:
        the savepoint is rolled back and nothing is reported as inserted.
        """
        try:
            existing = await self._existing_keys()
            missing = [page for page in self.all_defaults() if (page.name, page.lang) not in existing]
            if not missing:
                return False

            now = datetime.now(UTC)
            async with self.session.begin_nested():
                await self.session.execute(insert(LegalPage), [page.as_row(now) for page in missing])
        except IntegrityError as exc:
            logger.info("Missing pages were created concurrently: %s", exc)
            return False
        except SQLAlchemyError as exc:
            logger.warning("An error occurred checking missing pages: %s", exc)
            raise

        logger.info("%d missing pages were successfully stored into database.", len(missing))
        return True

    async def install_reset(self, *, force: bool = False) -> bool:
        """Reseed every page, or only fill gaps when the table already looks installed."""
        defaults = self.all_defaults()
        try:
            if not force and await self.count() >= len(defaults):
                return await self.reconcile()

            await self.session.execute(delete(LegalPage))
            now = datetime.now(UTC)
            rows = [page.as_row(now, id=index) for index, page in enumerate(defaults, start=1)]
            await self.session.execute(insert(LegalPage), rows)
            await self._reset_sequence(len(rows))
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.warning("Unable to initialize default texts: %s", exc)
            raise

        self._translated = set()
        logger.info("Default texts were successfully stored into database.")
        return True

    async def _reset_sequence(self, value: int) -> None:
        connection = await self.session.connection()
        dialect = connection.dialect.name
        table = LegalPage.__tablename__
        if dialect == "postgresql":
            await self.session.execute(
                text("SELECT setval(pg_get_serial_sequence(:table, 'id'), :value)"),
                {"table": table, "value": value},
            )
        elif dialect in {"mysql", "mariadb"}:
            await self.session.execute(text(f"ALTER TABLE {table} AUTO_INCREMENT = {int(value) + 1}"))

    async def _find(self, name: str, lang: str) -> LegalPage | None:
        result = await self.session.execute(
            select(LegalPage).where(LegalPage.name == name, LegalPage.lang == lang)
        )
        return result.scalars().first()

    async def _insert_default(self, page: DefaultPage) -> None:
        try:
            async with self.session.begin_nested():
                await self.session.execute(insert(LegalPage), [page.as_row(datetime.now(UTC))])
        except IntegrityError:
            logger.info("Page %s (%s) was created concurrently", page.name, page.lang)

    async def get(self, name: str, lang: str | None) -> LegalPage | None:
        """Page for ``name``/``lang``, created from defaults when missing.

        Returns ``None`` when ``name`` is not a known page.
        """
        lang = self.catalog.resolve(lang)
        try:
            page = await self._find(name, lang)
            if page is not None:
                return page

            default = next((d for d in self.default_pages(lang) if d.name == name), None)
            if default is None:
                logger.warning('Unable to find missing requested page "%s" (%s)', name, lang)
                return None

            await self._insert_default(default)
            page = await self._find(name, lang)
            if page is None:
                logger.warning('Unable to add missing requested page "%s" (%s)', name, lang)
            return page
        except SQLAlchemyError as exc:
            logger.warning("Cannot get page `%s` for lang `%s` | %s", name, lang, exc)
            raise

    async def store(self, name: str, lang: str, body: str, url: str) -> bool:
        """Update body and external URL of one page."""
        body = normalize_body(body or "")
        url = (url or "").strip()
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    update(LegalPage)
                    .where(LegalPage.name == name, LegalPage.lang == lang)
                    .values(body=body, url=url, last_update=datetime.now(UTC))
                )
        except SQLAlchemyError as exc:
            logger.error("An error has occurred while storing page content. | %s", exc)
            return False

        if not result.rowcount:
            logger.warning("No page %s (%s) to store content into", name, lang)
            return False

        page = await self._find(name, lang)
        if page is not None:
            if page.is_translated:
                self._translated.add(page.id)
            else:
                self._translated.discard(page.id)
        return True

    async def list_names(self, lang: str) -> list[tuple[str, str]]:
        try:
            result = await self.session.execute(
                select(LegalPage.name, LegalPage.label)
                .where(LegalPage.lang == lang)
                .order_by(LegalPage.id)
            )
        except SQLAlchemyError as exc:
            logger.warning("Cannot get pages names for lang `%s` | %s", lang, exc)
            raise
        return [(row.name, row.label) for row in result.all()]

    async def refresh_translated(self) -> set[int]:
        try:
            result = await self.session.execute(
                select(LegalPage.id).where(or_(LegalPage.body != "", LegalPage.url != ""))
            )
        except SQLAlchemyError as exc:
            logger.warning("An error occurred checking translated pages: %s", exc)
            raise
        self._translated = set(result.scalars().all())
        return set(self._translated)

    def is_translated(self, page_id: int) -> bool:
        return page_id in self._translated

    def render(self, page: LegalPage) -> str:
        return self.provider.render(page.body or "")

    def legend(self) -> dict[str, dict[str, Any]]:
        return legal_pages_legend(self.base_provider, self.page_provider)
