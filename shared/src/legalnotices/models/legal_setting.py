"""Legal notices settings model - string-encoded key/value rows."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from legalnotices.models.base import Base, prefixed


class LegalSetting(Base):
    __tablename__ = prefixed("settings")

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
