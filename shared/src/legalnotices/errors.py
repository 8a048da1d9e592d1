"""Domain exceptions."""

from __future__ import annotations


class LegalNoticesError(Exception):
    """Base class for legal notices errors."""


class UnknownSettingError(LegalNoticesError, KeyError):
    """Raised when a setting name is not part of the known settings."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown legal notices setting: {self.name}"


class SettingsUnavailableError(LegalNoticesError):
    """Raised when settings cannot be read from storage."""


def error_chain(exc: BaseException) -> list[str]:
    """Messages of an exception and every exception that caused it."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or current.__class__.__name__)
        current = current.__cause__ or current.__context__
    return messages
