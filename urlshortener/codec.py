"""Url validation and public short url building."""

import validators

from urlshortener.arguments import require_non_blank

__all__ = ["UrlCodec"]


class UrlCodec:
    """Validates submitted urls and joins tokens onto the public base url.

    Validation is purely syntactic (scheme and host structure) and never
    touches the network. Single-label hosts such as ``localhost`` are accepted.
    """

    def is_valid_url(self, candidate: str | None) -> bool:
        if not isinstance(candidate, str) or not candidate.strip():
            return False
        return bool(validators.url(candidate, simple_host=True, strict_query=False))

    def build_public_url(self, base_url: str, token: str) -> str:
        require_non_blank(base_url, "base_url")
        require_non_blank(token, "token")

        if not base_url.endswith("/"):
            base_url += "/"
        return base_url + token
