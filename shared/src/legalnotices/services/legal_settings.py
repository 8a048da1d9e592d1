"""Legal notices settings store -- closed set of typed keys backed by string rows."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legalnotices.errors import SettingsUnavailableError, UnknownSettingError, error_chain
from legalnotices.i18n import DEFAULT_LANG
from legalnotices.models import LegalSetting

logger = logging.getLogger(__name__)


class SettingKey(str, Enum):
    ENABLE_LEGAL_INFORMATION = "enable_legal_information"
    ENABLE_TERMS_OF_SERVICE = "enable_terms_of_service"
    ENABLE_PRIVACY_POLICY = "enable_privacy_policy"
    PUBLICPAGE_LINKS = "publicpage_links"
    FALLBACK_LANGUAGE = "fallback_language"
    ENABLE_CMP = "enable_cmp"
    HIDE_ACCEPT_ALL = "hide_accept_all"
    HIDE_DECLINE_ALL = "hide_decline_all"
    COOKIE_EXPIRATION = "cookie_expiration"
    COOKIE_DOMAIN = "cookie_domain"
    ENABLE_LOCALSTORAGE = "enable_localstorage"

    @classmethod
    def parse(cls, name: str | SettingKey) -> SettingKey:
        try:
            return cls(name)
        except ValueError:
            raise UnknownSettingError(str(name)) from None


SETTING_DEFAULTS: dict[SettingKey, bool | int | str] = {
    SettingKey.ENABLE_LEGAL_INFORMATION: False,
    SettingKey.ENABLE_TERMS_OF_SERVICE: False,
    SettingKey.ENABLE_PRIVACY_POLICY: False,
    SettingKey.PUBLICPAGE_LINKS: False,
    SettingKey.FALLBACK_LANGUAGE: DEFAULT_LANG,
    SettingKey.ENABLE_CMP: False,
    SettingKey.HIDE_ACCEPT_ALL: False,
    SettingKey.HIDE_DECLINE_ALL: False,
    SettingKey.COOKIE_EXPIRATION: 90,
    SettingKey.COOKIE_DOMAIN: "",
    SettingKey.ENABLE_LOCALSTORAGE: False,
}

INT_SETTINGS = frozenset({SettingKey.COOKIE_EXPIRATION})
BOOL_SETTINGS = frozenset(
    {
        SettingKey.ENABLE_LEGAL_INFORMATION,
        SettingKey.ENABLE_TERMS_OF_SERVICE,
        SettingKey.ENABLE_PRIVACY_POLICY,
        SettingKey.PUBLICPAGE_LINKS,
        SettingKey.ENABLE_CMP,
        SettingKey.HIDE_ACCEPT_ALL,
        SettingKey.HIDE_DECLINE_ALL,
        SettingKey.ENABLE_LOCALSTORAGE,
    }
)

# enable_<page> switches; the page name is the suffix with dashes.
PAGE_SETTINGS: dict[SettingKey, str] = {
    key: key.value[len("enable_"):].replace("_", "-")
    for key in (
        SettingKey.ENABLE_LEGAL_INFORMATION,
        SettingKey.ENABLE_TERMS_OF_SERVICE,
        SettingKey.ENABLE_PRIVACY_POLICY,
    )
}

_FALSE_STRINGS = frozenset({"0", "false", "off", "no"})


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def decode_setting(key: SettingKey, value: Any) -> Any:
    """Coerce a stored value to the type of ``key``; ``""`` means unset and is kept."""
    if value is None or value == "":
        return ""
    if key in INT_SETTINGS:
        if isinstance(value, bool):
            return int(value)
        try:
            return int(str(value).strip())
        except ValueError:
            logger.warning("Legal Notices setting `%s` has a non numeric value %r", key.value, value)
            return 0
    if key in BOOL_SETTINGS:
        return _to_bool(value)
    return str(value)


def encode_setting(key: SettingKey, value: Any) -> str:
    if value is None or value == "":
        return ""
    if key in BOOL_SETTINGS:
        return "1" if _to_bool(value) else "0"
    if isinstance(value, bool):
        return str(int(value))
    return str(value)


class ConsentSettings(BaseModel):
    """Typed view of the settings, unset values mapped to their falsy form."""

    enable_legal_information: bool = False
    enable_terms_of_service: bool = False
    enable_privacy_policy: bool = False
    publicpage_links: bool = False
    fallback_language: str = DEFAULT_LANG
    enable_cmp: bool = False
    hide_accept_all: bool = False
    hide_decline_all: bool = False
    cookie_expiration: int = 90
    cookie_domain: str = ""
    enable_localstorage: bool = False


class LegalSettings:
    """In-memory snapshot of the settings table with staged writes.

    Values are read with :meth:`get` and staged with :meth:`set` or
    :meth:`check`; nothing reaches storage before :meth:`store`.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._values: dict[str, Any] = {}
        self._enabled_pages: set[str] = set()

    @classmethod
    async def open(cls, session: AsyncSession) -> LegalSettings:
        """Load settings and insert any missing default key."""
        settings = cls(session)
        if not await settings.load():
            raise SettingsUnavailableError("Legal Notices settings cannot be loaded")
        return settings

    async def load(self, *, reconcile: bool = True) -> bool:
        self._values = {}
        self._enabled_pages = set()
        try:
            result = await self.session.execute(select(LegalSetting))
            rows = result.scalars().all()
        except SQLAlchemyError:
            logger.critical("Legal Notices settings cannot be loaded.", exc_info=True)
            return False

        for row in rows:
            self._values[row.name] = row.value
        self._refresh_enabled_pages()

        if reconcile:
            await self.reconcile()
        return True

    async def reconcile(self) -> bool:
        """Insert every default key missing from the loaded snapshot."""
        missing = [key for key in SettingKey if key.value not in self._values]
        if not missing:
            return False

        for key in missing:
            logger.info(
                "The field `%s` does not exist, Legal Notices will attempt to create it.",
                key.value,
            )
        rows = [
            {"name": key.value, "value": encode_setting(key, SETTING_DEFAULTS[key])}
            for key in missing
        ]
        try:
            async with self.session.begin_nested():
                await self.session.execute(insert(LegalSetting), rows)
        except SQLAlchemyError as exc:
            logger.warning("Unable to add missing Legal Notices settings: %s", exc)
            return False

        for row in rows:
            self._values[row["name"]] = row["value"]
        self._refresh_enabled_pages()
        logger.info("Missing Legal Notices settings were successfully stored into database.")
        return True

    async def install_reset(self) -> bool:
        """Drop every stored setting and insert the defaults."""
        rows = [
            {"name": key.value, "value": encode_setting(key, default)}
            for key, default in SETTING_DEFAULTS.items()
        ]
        try:
            await self.session.execute(delete(LegalSetting))
            await self.session.execute(insert(LegalSetting), rows)
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.warning("Unable to initialize default Legal Notices settings: %s", exc)
            raise

        self._values = {row["name"]: row["value"] for row in rows}
        self._refresh_enabled_pages()
        logger.info("Default Legal Notices settings were successfully stored into database.")
        return True

    def has(self, name: str | SettingKey) -> bool:
        try:
            key = SettingKey.parse(name)
        except UnknownSettingError:
            return False
        return key.value in self._values

    def get(self, name: str | SettingKey, default: Any = False) -> Any:
        """Typed value of ``name``; ``default`` when unknown or not loaded."""
        if not self.has(name):
            logger.info("Legal Notices setting `%s` is not set", getattr(name, "value", name))
            return default
        key = SettingKey.parse(name)
        return decode_setting(key, self._values[key.value])

    def set(self, name: str | SettingKey, value: Any) -> None:
        try:
            key = SettingKey.parse(name)
        except UnknownSettingError:
            logger.warning(
                "Trying to set a Legal Notices setting value which does not seem to exist (%s)",
                name,
            )
            return
        self._values[key.value] = value

    def check(self, candidate: Mapping[str, Any]) -> None:
        """Stage every known field from submitted form values."""
        for key in SettingKey:
            value = candidate.get(key.value, "")
            if value is None:
                value = ""
            elif isinstance(value, str):
                value = value.strip()
            self.set(key, value)

    async def store(self) -> bool:
        """Persist every known key in one transaction."""
        try:
            async with self.session.begin_nested():
                for key, default in SETTING_DEFAULTS.items():
                    logger.debug("Storing Legal Notices %s", key.value)
                    value = encode_setting(key, self._values.get(key.value, default))
                    await self.session.execute(
                        update(LegalSetting)
                        .where(LegalSetting.name == key.value)
                        .values(value=value)
                    )
        except SQLAlchemyError as exc:
            logger.warning("Unable to store Legal Notices settings | %s", error_chain(exc))
            return False

        self._refresh_enabled_pages()
        logger.info("Legal Notices settings were successfully stored into database.")
        return True

    def field_names(self) -> list[str]:
        return list(self._values)

    @staticmethod
    def defaults() -> dict[str, bool | int | str]:
        return {key.value: value for key, value in SETTING_DEFAULTS.items()}

    def as_dict(self) -> dict[str, Any]:
        return {name: self.get(name) for name in self.field_names() if self.has(name)}

    def snapshot(self) -> ConsentSettings:
        values: dict[str, Any] = {}
        for key in SettingKey:
            value = self.get(key, default="")
            if value != "":
                values[key.value] = value
            elif key in BOOL_SETTINGS:
                values[key.value] = False
        return ConsentSettings(**values)

    def get_fallback_language(self) -> str:
        value = self._values.get(SettingKey.FALLBACK_LANGUAGE.value)
        return str(value) if value else DEFAULT_LANG

    def is_page_enabled(self, name: str) -> bool:
        return name in self._enabled_pages

    @property
    def enabled_pages(self) -> frozenset[str]:
        return frozenset(self._enabled_pages)

    def _refresh_enabled_pages(self) -> None:
        self._enabled_pages = {
            page
            for key, page in PAGE_SETTINGS.items()
            if decode_setting(key, self._values.get(key.value)) is True
        }
