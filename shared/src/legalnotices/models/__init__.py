"""SQLAlchemy ORM models for legal notices."""

from legalnotices.models.base import Base
from legalnotices.models.legal_page import LegalPage
from legalnotices.models.legal_setting import LegalSetting

__all__ = [
    "Base",
    "LegalPage",
    "LegalSetting",
]
