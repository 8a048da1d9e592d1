"""Organization profile supplied by the host application."""

from __future__ import annotations

from pydantic import BaseModel

from legalnotices.config import get_settings


class OrganizationProfile(BaseModel):
    name: str = ""
    slogan: str = ""
    address: str = ""
    website: str = ""
    phone: str = ""
    email: str = ""
    logo_url: str = ""
    footer: str = ""


def load_organization_profile() -> OrganizationProfile:
    settings = get_settings()
    return OrganizationProfile(
        name=settings.org_name.strip(),
        slogan=settings.org_slogan.strip(),
        address=settings.org_address.strip(),
        website=settings.org_website.strip(),
        phone=settings.org_phone.strip(),
        email=settings.org_email.strip(),
        logo_url=settings.org_logo_url.strip(),
        footer=settings.org_footer.strip(),
    )
