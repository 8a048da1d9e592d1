"""Language catalog: known languages and localized default labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from legalnotices.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en_US"

KNOWN_LANGUAGES: dict[str, str] = {
    "de_DE": "Deutsch",
    "en_US": "English",
    "es_ES": "Español",
    "fr_FR": "Français",
    "it_IT": "Italiano",
    "nb_NO": "Norsk bokmål",
    "pt_BR": "Português do Brasil",
}

# msgid -> lang -> translation; missing entries fall back to the msgid.
TRANSLATIONS: dict[str, dict[str, str]] = {
    "Legal Information": {
        "de_DE": "Rechtliche Hinweise",
        "es_ES": "Información legal",
        "fr_FR": "Informations légales",
        "it_IT": "Note legali",
        "nb_NO": "Juridisk informasjon",
        "pt_BR": "Informações legais",
    },
    "Terms of Service": {
        "de_DE": "Nutzungsbedingungen",
        "es_ES": "Condiciones de uso",
        "fr_FR": "Conditions d'utilisation",
        "it_IT": "Termini di servizio",
        "nb_NO": "Tjenestevilkår",
        "pt_BR": "Termos de serviço",
    },
    "Privacy Policy": {
        "de_DE": "Datenschutzerklärung",
        "es_ES": "Política de privacidad",
        "fr_FR": "Politique de confidentialité",
        "it_IT": "Informativa sulla privacy",
        "nb_NO": "Personvernerklæring",
        "pt_BR": "Política de privacidade",
    },
}


@dataclass(frozen=True)
class Language:
    id: str
    name: str


class LanguageCatalog:
    """Languages known to the host application.

    ``default`` is the language used when a caller asks for something the
    catalog does not know.
    """

    def __init__(self, languages: dict[str, str] | None = None, default: str = DEFAULT_LANG) -> None:
        self._languages = dict(languages if languages is not None else KNOWN_LANGUAGES)
        if default not in self._languages:
            raise ValueError(f"Default language {default!r} is not a known language")
        self.default = default

    def ids(self) -> list[str]:
        return sorted(self._languages)

    def languages(self) -> list[Language]:
        return [Language(id=lang_id, name=self._languages[lang_id]) for lang_id in self.ids()]

    def is_known(self, lang: str | None) -> bool:
        return bool(lang) and lang in self._languages

    def resolve(self, lang: str | None) -> str:
        """Return ``lang`` when known, else the default language."""
        if self.is_known(lang):
            return str(lang)
        logger.warning("Language %s does not exist. Falling back to default language %s.", lang, self.default)
        return self.default

    def translate(self, msgid: str, lang: str) -> str:
        return TRANSLATIONS.get(msgid, {}).get(lang, msgid)


def get_language_catalog() -> LanguageCatalog:
    """Build the catalog from configuration (``LANGUAGES``/``DEFAULT_LANGUAGE``)."""
    settings = get_settings()
    enabled = settings.languages or list(KNOWN_LANGUAGES)
    languages = {lang: KNOWN_LANGUAGES.get(lang, lang) for lang in enabled}
    default = settings.default_language if settings.default_language in languages else DEFAULT_LANG
    languages.setdefault(default, KNOWN_LANGUAGES.get(default, default))
    return LanguageCatalog(languages, default=default)
