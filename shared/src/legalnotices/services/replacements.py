"""Marker substitution for legal page bodies.

Page bodies are stored with markers such as ``{ASSO_NAME}`` or
``{ASSO_EMAIL_LINK}`` and expanded at render time, so a change to the
organization profile shows up on every page without editing it.

Markers come from pattern providers: the host provider exposes the generic
organization markers, the legal pages provider adds the phone and email
links. Providers are merged before substitution.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from legalnotices.services.organization import OrganizationProfile

PatternLike = re.Pattern[str] | str

_PHONE_LINK_STRIP_RE = re.compile(r"[^0-9+]")

# Host markers that make no sense on a public legal page.
LEGAL_PAGES_HIDDEN_MAIN_PATTERNS = (
    "asso_logo",
    "asso_print_logo",
    "date_now",
    "login_uri",
    "asso_footer",
)
LEGAL_PAGES_HIDDEN_GROUPS = ("member",)


@dataclass(frozen=True)
class PatternDefinition:
    key: str
    title: str
    marker: str

    @property
    def pattern(self) -> re.Pattern[str]:
        return re.compile(re.escape(self.marker))

    def legend_entry(self) -> dict[str, str]:
        return {"title": self.title, "pattern": self.marker}


class PatternProvider(Protocol):
    def patterns(self) -> dict[str, re.Pattern[str]]: ...

    def replacements(self) -> dict[str, str]: ...

    def legend(self) -> dict[str, dict[str, Any]]: ...


def _compile(pattern: PatternLike) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(re.escape(str(pattern)))


def substitute(
    body: str,
    patterns: Mapping[str, PatternLike],
    replacements: Mapping[str, str],
) -> str:
    """Replace every pattern occurrence with its replacement value.

    Only keys present in both mappings are substituted. Every pattern scans
    the original body with its own flags and groups; overlapping matches are
    resolved leftmost first, earlier keys winning ties. Replacement values
    are spliced in once and never scanned again. Empty matches are ignored.
    """
    if not body:
        return body

    matches: list[tuple[int, int, int, str]] = []
    for order, key in enumerate(key for key in patterns if key in replacements):
        for match in _compile(patterns[key]).finditer(body):
            if match.end() > match.start():
                matches.append((match.start(), order, match.end(), key))
    if not matches:
        return body
    matches.sort()

    parts: list[str] = []
    position = 0
    for start, _, end, key in matches:
        if start < position:
            continue
        parts.append(body[position:start])
        parts.append(str(replacements[key]))
        position = end
    parts.append(body[position:])
    return "".join(parts)


def phone_link(phone: str) -> str:
    target = _PHONE_LINK_STRIP_RE.sub("", phone)
    return f'<a href="tel:{target}">{phone}</a>'


def obfuscated_email(email: str) -> str:
    """Render an email as nested spans readable by humans but not by naive scrapers."""
    if not email:
        return ""
    user_part, _, domain_part = email.partition("@")
    domain_part = domain_part.replace(".", '<span class="p"> [dot] </span>')
    return (
        '<span class="obfuscate">'
        f'<span class="u">{user_part}</span> [at] <span class="d">{domain_part}</span>'
        "</span>"
    )


class HostPatternProvider:
    """Generic organization markers exposed by the host application."""

    MAIN_TITLE = "Main information"
    MEMBER_TITLE = "Member information"

    MAIN_PATTERNS = (
        PatternDefinition("asso_name", "Your organisation name", "{ASSO_NAME}"),
        PatternDefinition("asso_slogan", "Your organisation slogan", "{ASSO_SLOGAN}"),
        PatternDefinition("asso_address", "Your organisation address", "{ASSO_ADDRESS}"),
        PatternDefinition(
            "asso_address_multi",
            "Your organisation address (with line breaks)",
            "{ASSO_ADDRESS_MULTI}",
        ),
        PatternDefinition("asso_website", "Your organisation website", "{ASSO_WEBSITE}"),
        PatternDefinition("asso_logo", "Your organisation logo", "{ASSO_LOGO}"),
        PatternDefinition("asso_print_logo", "Your organisation logo (print)", "{ASSO_PRINT_LOGO}"),
        PatternDefinition("date_now", "Current date (Y-m-d)", "{DATE_NOW}"),
        PatternDefinition("login_uri", "Login URI", "{LOGIN_URI}"),
        PatternDefinition("asso_footer", "Your organisation footer", "{ASSO_FOOTER}"),
    )
    MEMBER_PATTERNS = (
        PatternDefinition("adh_name", "Member's name", "{NAME_ADH}"),
        PatternDefinition("adh_first_name", "Member's first name", "{FIRSTNAME_ADH}"),
        PatternDefinition("adh_last_name", "Member's last name", "{LASTNAME_ADH}"),
        PatternDefinition("adh_login", "Member's login", "{LOGIN_ADH}"),
        PatternDefinition("adh_email", "Member's email address", "{MAIL_ADH}"),
    )

    def __init__(
        self,
        profile: OrganizationProfile,
        *,
        login_uri: str = "",
        today: date | None = None,
    ) -> None:
        self.profile = profile
        self.login_uri = login_uri
        self.today = today

    def patterns(self) -> dict[str, re.Pattern[str]]:
        return {
            definition.key: definition.pattern
            for definition in (*self.MAIN_PATTERNS, *self.MEMBER_PATTERNS)
        }

    def replacements(self) -> dict[str, str]:
        profile = self.profile
        address_lines = [line.strip() for line in profile.address.splitlines() if line.strip()]
        logo = ""
        if profile.logo_url:
            logo = f'<img src="{html.escape(profile.logo_url)}" alt="{html.escape(profile.name)}"/>'
        today = self.today or date.today()
        # Member markers are only known inside a member context.
        return {
            "asso_name": profile.name,
            "asso_slogan": profile.slogan,
            "asso_address": ", ".join(address_lines),
            "asso_address_multi": "<br/>".join(address_lines),
            "asso_website": profile.website,
            "asso_logo": logo,
            "asso_print_logo": logo,
            "date_now": today.isoformat(),
            "login_uri": self.login_uri,
            "asso_footer": profile.footer,
        }

    def legend(self) -> dict[str, dict[str, Any]]:
        return {
            "main": {
                "title": self.MAIN_TITLE,
                "patterns": {d.key: d.legend_entry() for d in self.MAIN_PATTERNS},
            },
            "member": {
                "title": self.MEMBER_TITLE,
                "patterns": {d.key: d.legend_entry() for d in self.MEMBER_PATTERNS},
            },
        }


class LegalPagesPatternProvider:
    """Phone and email link markers specific to legal pages."""

    TITLE = "Specific to the Legal Notices plugin"

    PATTERNS = (
        PatternDefinition("asso_phone_link", "Your organisation phone number link", "{ASSO_PHONE_LINK}"),
        PatternDefinition("asso_email_link", "Your organisation email address link", "{ASSO_EMAIL_LINK}"),
    )

    def __init__(self, profile: OrganizationProfile) -> None:
        self.profile = profile

    def patterns(self) -> dict[str, re.Pattern[str]]:
        return {definition.key: definition.pattern for definition in self.PATTERNS}

    def replacements(self) -> dict[str, str]:
        return {
            "asso_phone_link": phone_link(self.profile.phone),
            "asso_email_link": obfuscated_email(self.profile.email),
        }

    def legend(self) -> dict[str, dict[str, Any]]:
        return {
            "pages": {
                "title": self.TITLE,
                "patterns": {d.key: d.legend_entry() for d in self.PATTERNS},
            }
        }


class MergedPatternProvider:
    """Union of several providers; later providers win on key clashes."""

    def __init__(self, *providers: PatternProvider) -> None:
        self.providers = providers

    def patterns(self) -> dict[str, re.Pattern[str]]:
        merged: dict[str, re.Pattern[str]] = {}
        for provider in self.providers:
            merged.update(provider.patterns())
        return merged

    def replacements(self) -> dict[str, str]:
        merged: dict[str, str] = {}
        for provider in self.providers:
            merged.update(provider.replacements())
        return merged

    def legend(self) -> dict[str, dict[str, Any]]:
        merged: dict[str, dict[str, Any]] = {}
        for provider in self.providers:
            merged.update(provider.legend())
        return merged

    def render(self, body: str) -> str:
        return substitute(body, self.patterns(), self.replacements())


def merge_providers(base: PatternProvider, *extra: PatternProvider) -> MergedPatternProvider:
    return MergedPatternProvider(base, *extra)


def legal_pages_legend(base: PatternProvider, pages: PatternProvider) -> dict[str, dict[str, Any]]:
    """Base legend without entries irrelevant to legal pages, plus the page markers."""
    legend: dict[str, dict[str, Any]] = {}
    for group, entry in base.legend().items():
        if group in LEGAL_PAGES_HIDDEN_GROUPS:
            continue
        patterns = dict(entry.get("patterns", {}))
        if group == "main":
            for key in LEGAL_PAGES_HIDDEN_MAIN_PATTERNS:
                patterns.pop(key, None)
        legend[group] = {"title": entry.get("title", group), "patterns": patterns}
    legend.update(pages.legend())
    return legend
