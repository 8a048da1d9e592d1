"""Tests for the legal pages repository."""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from legalnotices.models import LegalPage
from legalnotices.services.legal_pages import (
    PAGE_NAMES,
    LegalPages,
    default_pages,
    normalize_body,
    seed_defaults,
)
from sqlalchemy import delete, func, select


async def _count(session) -> int:
    result = await session.execute(select(func.count(LegalPage.id)))
    return int(result.scalar())


class TestDefaults:
    def test_default_pages_are_localized(self, catalog):
        pages = default_pages(catalog, "fr_FR")
        assert [page.name for page in pages] == list(PAGE_NAMES)
        assert pages[0].label == "Informations légales"
        assert all(page.body == "" and page.url == "" for page in pages)

    def test_seed_defaults_covers_every_language(self, catalog):
        assert len(seed_defaults(catalog)) == 6
        assert {page.lang for page in seed_defaults(catalog, ["fr_FR"])} == {"fr_FR"}

    @pytest.mark.parametrize("body", ["<br>", "<p><br></p>", " <br> "])
    def test_editor_placeholders_normalize_to_empty(self, body):
        assert normalize_body(body) == ""

    def test_real_content_is_kept(self):
        assert normalize_body("<p>Hello</p>") == "<p>Hello</p>"


class TestReconcile:
    async def test_inserts_every_missing_page(self, pages, session, catalog):
        assert await pages.reconcile() is True
        assert await _count(session) == 6
        for lang in catalog.ids():
            for name in PAGE_NAMES:
                page = await pages.get(name, lang)
                assert page is not None
                assert page.body == ""
                assert page.url == ""

    async def test_is_idempotent(self, pages, session):
        await pages.reconcile()
        assert await pages.reconcile() is False
        assert await _count(session) == 6

    async def test_concurrent_insert_is_absorbed(self, pages, session):
        await pages.reconcile()
        # Rows were inserted by another request after this one read the table.
        with patch.object(pages, "_existing_keys", new=AsyncMock(return_value=set())):
            assert await pages.reconcile() is False
        assert await _count(session) == 6
        assert await pages.get("legal-information", "fr_FR") is not None

    async def test_fills_partial_state(self, pages, session):
        await pages.reconcile()
        await session.execute(delete(LegalPage).where(LegalPage.lang == "fr_FR"))
        assert await _count(session) == 3
        assert await pages.reconcile() is True
        assert await _count(session) == 6


class TestInstallReset:
    async def test_empty_table_is_seeded(self, pages, session):
        assert await pages.install_reset() is True
        assert await _count(session) == 6

    async def test_without_force_keeps_content(self, pages, session):
        await pages.reconcile()
        assert await pages.store("privacy-policy", "en_US", "<p>Kept</p>", "")
        assert await pages.install_reset(force=False) is False
        assert await _count(session) == 6
        page = await pages.get("privacy-policy", "en_US")
        assert page.body == "<p>Kept</p>"

    async def test_force_purges_and_reseeds(self, pages, session):
        await pages.reconcile()
        assert await pages.store("privacy-policy", "en_US", "<p>Gone</p>", "")
        assert await pages.install_reset(force=True) is True
        result = await session.execute(select(LegalPage.id, LegalPage.body).order_by(LegalPage.id))
        rows = result.all()
        assert [row.id for row in rows] == [1, 2, 3, 4, 5, 6]
        assert all(row.body == "" for row in rows)
        assert not pages.is_translated(1)


class TestGet:
    async def test_lazily_creates_missing_page(self, pages, session):
        page = await pages.get("terms-of-service", "fr_FR")
        assert page is not None
        assert page.label == "Conditions d'utilisation"
        assert await _count(session) == 1

    async def test_unknown_language_falls_back_to_default(self, pages, caplog):
        with caplog.at_level(logging.WARNING):
            page = await pages.get("legal-information", "xx_XX")
        assert page.lang == "en_US"
        assert "xx_XX" in caplog.text

    async def test_unknown_name_returns_none(self, pages, caplog):
        with caplog.at_level(logging.WARNING):
            assert await pages.get("cookie-policy", "en_US") is None
        assert "cookie-policy" in caplog.text

    async def test_existing_row_is_reused(self, pages, session):
        first = await pages.get("legal-information", "en_US")
        second = await pages.get("legal-information", "en_US")
        assert first.id == second.id
        assert await _count(session) == 1


class TestStore:
    async def test_placeholder_bodies_are_stored_empty(self, pages):
        await pages.reconcile()
        for placeholder in ("<br>", "<p><br></p>"):
            assert await pages.store("legal-information", "en_US", "<p>x</p>", "")
            assert await pages.store("legal-information", "en_US", placeholder, "")
            page = await pages.get("legal-information", "en_US")
            assert page.body == ""

    async def test_url_is_trimmed(self, pages):
        await pages.reconcile()
        assert await pages.store("terms-of-service", "en_US", "", "  https://example.org/tos  ")
        page = await pages.get("terms-of-service", "en_US")
        assert page.url == "https://example.org/tos"

    async def test_missing_row_reports_failure(self, pages):
        assert await pages.store("legal-information", "en_US", "<p>x</p>", "") is False

    async def test_translation_state_follows_content(self, pages):
        await pages.reconcile()
        page = await pages.get("legal-information", "en_US")
        assert not pages.is_translated(page.id)
        await pages.store("legal-information", "en_US", "<p>Hi</p>", "")
        assert pages.is_translated(page.id)
        await pages.store("legal-information", "en_US", "<br>", "")
        assert not pages.is_translated(page.id)

    async def test_refresh_translated_reads_storage(self, pages):
        await pages.reconcile()
        await pages.store("privacy-policy", "fr_FR", "", "https://example.org/privacy")
        page = await pages.get("privacy-policy", "fr_FR")
        assert page.id in await pages.refresh_translated()


class TestRender:
    async def test_round_trip_without_markers(self, pages):
        await pages.reconcile()
        body = "<h2>Who we are</h2><p>Plain text, no markers.</p>"
        await pages.store("legal-information", "en_US", body, "")
        page = await pages.get("legal-information", "en_US")
        assert pages.render(page) == body

    async def test_markers_are_expanded(self, pages):
        await pages.reconcile()
        await pages.store("legal-information", "en_US", "<p>{ASSO_NAME}: {ASSO_PHONE_LINK}</p>", "")
        page = await pages.get("legal-information", "en_US")
        assert pages.render(page) == (
            '<p>Galette: <a href="tel:+00000000000">+00 0 00 00 00 00</a></p>'
        )


class TestListing:
    async def test_list_names_in_seed_order(self, pages):
        await pages.reconcile()
        names = await pages.list_names("fr_FR")
        assert [name for name, _ in names] == list(PAGE_NAMES)
        assert names[2][1] == "Politique de confidentialité"

    async def test_open_reconciles_and_loads_translation_state(
        self, session, catalog, base_provider, page_provider, pages
    ):
        await pages.reconcile()
        await pages.store("legal-information", "en_US", "<p>Hi</p>", "")
        reopened = await LegalPages.open(
            session, catalog, base_provider=base_provider, page_provider=page_provider
        )
        page = await reopened.get("legal-information", "en_US")
        assert reopened.is_translated(page.id)
        assert await reopened.count() == 6

    def test_legend_hides_member_group(self, pages):
        assert "member" not in pages.legend()
