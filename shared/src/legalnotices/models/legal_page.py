"""Legal page model - one row per (name, lang)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from legalnotices.models.base import Base, prefixed


class LegalPage(Base):
    __tablename__ = prefixed("pages")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    lang: Mapped[str] = mapped_column(String(20), nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    url: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    last_update: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (UniqueConstraint("name", "lang", name=f"uq_{prefixed('pages')}_name_lang"),)

    @property
    def is_translated(self) -> bool:
        return bool(self.body) or bool(self.url)
