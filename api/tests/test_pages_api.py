"""Tests for the admin legal page endpoints."""


class TestPagesAuth:
    async def test_requires_token(self, client):
        resp = await client.get("/admin/pages")
        assert resp.status_code == 401

    async def test_rejects_invalid_token(self, client):
        resp = await client.get("/admin/pages", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    async def test_member_is_forbidden(self, client, member_headers):
        resp = await client.get("/admin/pages", headers=member_headers)
        assert resp.status_code == 403

    async def test_admin_is_allowed(self, client, admin_headers):
        resp = await client.get("/admin/pages", headers=admin_headers)
        assert resp.status_code == 200


class TestListPages:
    async def test_defaults_to_legal_information(self, client, staff_headers):
        resp = await client.get("/admin/pages", headers=staff_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "legal-information"
        assert data["lang"] == "en_US"
        assert [page["name"] for page in data["pages"]] == [
            "legal-information",
            "terms-of-service",
            "privacy-policy",
        ]
        assert {language["id"] for language in data["languages"]} == {"en_US", "fr_FR"}
        assert data["page"]["body"] == ""
        assert data["page"]["translated"] is False

    async def test_specific_page_is_localized(self, client, staff_headers):
        resp = await client.get("/admin/pages/fr_FR/terms-of-service", headers=staff_headers)
        assert resp.status_code == 200
        assert resp.json()["page"]["label"] == "Conditions d'utilisation"

    async def test_unknown_language_falls_back(self, client, staff_headers):
        resp = await client.get("/admin/pages/xx_XX/privacy-policy", headers=staff_headers)
        assert resp.status_code == 200
        assert resp.json()["lang"] == "en_US"

    async def test_unknown_page(self, client, staff_headers):
        resp = await client.get("/admin/pages/en_US/cookie-policy", headers=staff_headers)
        assert resp.status_code == 404

    async def test_query_parameters(self, client, staff_headers):
        resp = await client.get(
            "/admin/pages",
            params={"lang": "fr_FR", "name": "privacy-policy"},
            headers=staff_headers,
        )
        assert resp.json()["page"]["label"] == "Politique de confidentialité"


class TestChangePage:
    async def test_redirects_to_selection(self, client, staff_headers):
        resp = await client.post(
            "/admin/pages/change",
            json={"sel_lang": "fr_FR", "sel_page": "privacy-policy"},
            headers=staff_headers,
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/admin/pages/fr_FR/privacy-policy"

    async def test_empty_selection_uses_defaults(self, client, staff_headers):
        resp = await client.post("/admin/pages/change", json={}, headers=staff_headers)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/admin/pages/en_US/legal-information"


class TestEditPage:
    async def test_store_and_flash(self, client, staff_headers):
        resp = await client.post(
            "/admin/pages",
            json={
                "page_name": "legal-information",
                "page_lang": "en_US",
                "page_body": "<p>{ASSO_NAME}</p>",
                "page_url": "",
            },
            headers=staff_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["flash"]["success_detected"] == [
            'The "Legal Information" page has been successfully modified.'
        ]
        assert data["location"] == "/admin/pages/en_US/legal-information"

        page = (await client.get("/admin/pages/en_US/legal-information", headers=staff_headers)).json()
        assert page["page"]["body"] == "<p>{ASSO_NAME}</p>"
        assert page["page"]["translated"] is True

    async def test_placeholder_body_is_cleared(self, client, staff_headers):
        await client.post(
            "/admin/pages",
            json={"page_name": "terms-of-service", "page_lang": "en_US", "page_body": "<p><br></p>"},
            headers=staff_headers,
        )
        page = (await client.get("/admin/pages/en_US/terms-of-service", headers=staff_headers)).json()
        assert page["page"]["body"] == ""

    async def test_unknown_page(self, client, staff_headers):
        resp = await client.post(
            "/admin/pages",
            json={"page_name": "cookie-policy", "page_lang": "en_US"},
            headers=staff_headers,
        )
        assert resp.status_code == 404


class TestLegend:
    async def test_legend_groups(self, client, staff_headers):
        resp = await client.get("/admin/pages/legend", headers=staff_headers)
        assert resp.status_code == 200
        legend = resp.json()
        assert set(legend) == {"main", "pages"}
        assert "asso_logo" not in legend["main"]["patterns"]
        assert legend["pages"]["patterns"]["asso_email_link"]["pattern"] == "{ASSO_EMAIL_LINK}"
