"""Exception hierarchy for the URL shortener.

Every error raised by the core carries a message key and message arguments so
the HTTP layer can render a localized message (see ``urlshortener.messages``).

Error Taxonomy
==============
::
    ShortenerError
    ├─ RequiredValueError          internal contract violation (500)
    ├─ InvalidUrlError             submitted url is malformed (400)
    ├─ InvalidTokenError           submitted token is blank (400)
    ├─ TokenNotFoundError          token has no record (404)
    ├─ TokenCollisionError         candidate token already used (retried)
    ├─ TokenCannotBeCreatedError   attempts exhausted / blank token (500)
    ├─ InvalidJsonBodyError        request body is not valid JSON (400)
    └─ InvalidContentTypeError     request body is not JSON at all (400)
"""

from urlshortener.enums import Requirement

__all__ = [
    "ShortenerError",
    "RequiredValueError",
    "InvalidUrlError",
    "InvalidTokenError",
    "TokenNotFoundError",
    "TokenCollisionError",
    "TokenCannotBeCreatedError",
    "InvalidJsonBodyError",
    "InvalidContentTypeError",
]


class ShortenerError(Exception):
    """Base class for errors that can be rendered as a localized message."""

    message_key: str = "error.unexpected"

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return ()

    def __repr__(self) -> str:
        args = ", ".join(repr(arg) for arg in self.message_args)
        return f"{type(self).__name__}({args})"


class RequiredValueError(ShortenerError, ValueError):
    """A value failed an argument guard from ``urlshortener.arguments``."""

    def __init__(self, field_name: str | None, requirement: Requirement) -> None:
        super().__init__(f"RequiredValueError : fieldName[{field_name}] type[{requirement}]")
        self.field_name = field_name
        self.requirement = requirement

    @property
    def message_key(self) -> str:  # type: ignore[override]
        return f"error.required.{self.requirement.value}"

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.field_name,)


class InvalidUrlError(ShortenerError):
    message_key = "error.shorturl.InvalidUrl"

    def __init__(self, url: str | None) -> None:
        super().__init__(f"Invalid url: {url!r}")
        self.url = url

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.url,)


class InvalidTokenError(ShortenerError):
    message_key = "error.shorturl.InvalidToken"

    def __init__(self, token: str | None) -> None:
        super().__init__(f"Invalid token: {token!r}")
        self.token = token

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.token,)


class TokenNotFoundError(ShortenerError):
    message_key = "error.shorturl.TokenNotFound"

    def __init__(self, token: str) -> None:
        super().__init__(f"Token not found: {token!r}")
        self.token = token

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.token,)


class TokenCollisionError(ShortenerError):
    """A candidate token (or the original url) is already bound to a record."""

    message_key = "error.shorturl.TokenAlreadyUsed"

    def __init__(self, token: str, original_url: str) -> None:
        super().__init__(f"Token {token!r} already used, requested for {original_url!r}")
        self.token = token
        self.original_url = original_url

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.token, self.original_url)


class TokenCannotBeCreatedError(ShortenerError):
    message_key = "error.shorturl.TokenCannotBeCreated"

    def __init__(self, original_url: str) -> None:
        super().__init__(f"No token could be created for {original_url!r}")
        self.original_url = original_url

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.original_url,)


class InvalidJsonBodyError(ShortenerError):
    message_key = "error.json.body.invalid"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or "Invalid JSON body")
        self.detail = detail


class InvalidContentTypeError(ShortenerError):
    message_key = "error.rest.content.type"

    def __init__(self, content_type: str | None) -> None:
        super().__init__(f"Unsupported content type: {content_type!r}")
        self.content_type = content_type

    @property
    def message_args(self) -> tuple[str | None, ...]:
        return (self.content_type,)
