"""Declarative base for legal notices tables."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase

from legalnotices.config import get_settings


class Base(DeclarativeBase):
    pass


def prefixed(table: str) -> str:
    """Return the table name namespaced with the configured prefix."""
    return f"{get_settings().table_prefix}{table}"
