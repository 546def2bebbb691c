"""Localized error messages for the HTTP layer.

Each ShortenerError exposes a ``message_key`` and ``message_args``; this module
turns them into text for the request locale. The locale comes from the
``lang`` query parameter (``?lang=fr``) and falls back to the configured
``DEFAULT_LOCALE``, then to English.

Message Lookup
==============
::
    error ──► message_key ──► CATALOGS[locale] ──► template.format(*args)
                                   │ missing
                                   ▼
                             CATALOGS["en"] ──► repr(error)
"""

from urlshortener.exceptions import ShortenerError

__all__ = ["CATALOGS", "FALLBACK_LOCALE", "localize", "resolve_locale"]

FALLBACK_LOCALE = "en"

CATALOGS: dict[str, dict[str, str]] = {
    "en": {
        "error.shorturl.InvalidUrl": "The url [{0}] is not a valid url.",
        "error.shorturl.InvalidToken": "The short url token [{0}] is not a valid token.",
        "error.shorturl.TokenNotFound": "The short url token [{0}] does not exist.",
        "error.shorturl.TokenAlreadyUsed": "The short url token [{0}] is already used and cannot be assigned to [{1}].",
        "error.shorturl.TokenCannotBeCreated": "A short url token could not be created for the url [{0}].",
        "error.json.body.invalid": "The JSON body of the request is invalid.",
        "error.rest.content.type": "The content type [{0}] is not supported, use application/json.",
        "error.required.InvalidField": "The field [{0}] is invalid.",
        "error.required.NotNull": "The field [{0}] is required.",
        "error.required.NotEmpty": "The field [{0}] cannot be empty.",
        "error.required.NotBlank": "The field [{0}] cannot be blank.",
        "error.required.NotNegative": "The field [{0}] cannot be negative.",
        "error.required.NotZero": "The field [{0}] cannot be zero.",
    },
    "fr": {
        "error.shorturl.InvalidUrl": "L'url [{0}] n'est pas une url valide.",
        "error.shorturl.InvalidToken": "Le jeton d'url courte [{0}] n'est pas un jeton valide.",
        "error.shorturl.TokenNotFound": "Le jeton d'url courte [{0}] n'existe pas.",
        "error.shorturl.TokenAlreadyUsed": "Le jeton d'url courte [{0}] est déjà utilisé et ne peut pas être assigné à [{1}].",
        "error.shorturl.TokenCannotBeCreated": "Aucun jeton d'url courte n'a pu être créé pour l'url [{0}].",
        "error.json.body.invalid": "Le corps JSON de la requête est invalide.",
        "error.rest.content.type": "Le type de contenu [{0}] n'est pas supporté, utilisez application/json.",
        "error.required.InvalidField": "Le champ [{0}] est invalide.",
        "error.required.NotNull": "Le champ [{0}] est obligatoire.",
        "error.required.NotEmpty": "Le champ [{0}] ne peut pas être vide.",
        "error.required.NotBlank": "Le champ [{0}] ne peut pas être blanc.",
        "error.required.NotNegative": "Le champ [{0}] ne peut pas être négatif.",
        "error.required.NotZero": "Le champ [{0}] ne peut pas être zéro.",
    },
}


def resolve_locale(requested: str | None, default: str = FALLBACK_LOCALE) -> str:
    """Pick the catalog for ``requested`` (``fr``, ``fr-CA``, ``FR``...) or ``default``."""
    for candidate in (requested, default):
        if candidate:
            language = candidate.replace("_", "-").split("-")[0].lower()
            if language in CATALOGS:
                return language
    return FALLBACK_LOCALE


def localize(error: ShortenerError, locale: str = FALLBACK_LOCALE) -> str:
    template = CATALOGS.get(locale, {}).get(error.message_key) or CATALOGS[FALLBACK_LOCALE].get(error.message_key)
    if template is None:
        return repr(error)
    args = ["" if arg is None else str(arg) for arg in error.message_args]
    try:
        return template.format(*args)
    except IndexError:
        return repr(error)
