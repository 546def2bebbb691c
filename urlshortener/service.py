"""URL Shortener Service Layer - Core Business Logic

This module turns original urls into short urls and short url tokens back into
original urls. Shortening is idempotent: a url that already has a token gets
the same token again, and a new token is only minted when none exists.

Architecture Overview
=====================
::
    ┌─────────────────────────────────────────────────────────────┐
    │                   ShorteningService                         │
    │  ┌─────────────────┐  ┌─────────────────┐  ┌──────────────┐ │
    │  │    UrlCodec     │  │ RandomToken-    │  │ TokenRegistry│ │
    │  │                 │  │ Generator       │  │              │ │
    │  │ • Validate URL  │  │ • Random token  │  │ • By token   │ │
    │  │ • Build short   │  │   from alphabet │  │ • By url     │ │
    │  │   URL           │  │                 │  │ • Insert     │ │
    │  └─────────────────┘  └─────────────────┘  └──────┬───────┘ │
    └────────────────────────────────────────────────────┼─────────┘
                                                         ▼
                                              ┌─────────────────┐
                                              │   PostgreSQL    │
                                              │   short_url     │
                                              └─────────────────┘

Token Creation Flow — find_or_create_token()
============================================
::
    ┌─────────────┐
    │ Lookup by   │──found──► return existing token
    │ original url│
    └──────┬──────┘
           ▼
    ┌─────────────┐◄──────────────────────────┐
    │ Generate    │                           │
    │ candidate   │──blank──► TokenCannotBeCreated
    └──────┬──────┘                           │
           ▼                                  │
    ┌─────────────┐                           │
    │ try_create  │──Created──► return token  │
    └──────┬──────┘                           │
           │ Collision                        │
           ▼                                  │
    ┌─────────────┐                           │
    │ url taken by│──yes──► return winner's token
    │ a racer?    │                           │
    └──────┬──────┘                           │
           │ no                               │
           ▼                                  │
    ┌─────────────┐                           │
    │ attempts    │──no───────────────────────┘
    │ exhausted?  │
    └──────┬──────┘
           │ yes
           ▼
    TokenCannotBeCreated

Only collisions consume an attempt and loop. A blank candidate means the
alphabet is misconfigured and stops immediately; any storage error
propagates unchanged.

How to Use
==========
```python
@router.post("/")
async def create_short_url(
    payload: CreateShortUrlRequest,
    service: ShorteningService = Depends(get_shortening_service),
) -> CreateShortUrlResponse:
    short_url = await service.obtain_short_url(payload.url)
    return CreateShortUrlResponse(success=True, shortUrl=short_url)
```
"""

import logging
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

from urlshortener.arguments import is_blank, require_strictly_positive
from urlshortener.codec import UrlCodec
from urlshortener.config import Settings
from urlshortener.enums import RequestStatus, UniqueColumn
from urlshortener.exceptions import (
    InvalidTokenError,
    InvalidUrlError,
    TokenCannotBeCreatedError,
    TokenNotFoundError,
)
from urlshortener.registry import Created, TokenRegistry
from urlshortener.tokens import RandomTokenGenerator

if TYPE_CHECKING:
    from urlshortener.dependencies import RequestContext

__all__ = ["ShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

SHORT_URL_CREATION_REQUESTS_TOTAL = Counter(
    "url_shortener_creation_requests_total",
    "Total short url creation requests",
    ["status"]
)
SHORT_URL_RESOLUTION_REQUESTS_TOTAL = Counter(
    "url_shortener_resolution_requests_total",
    "Total short url token resolution requests",
    ["status"]
)
SHORT_URL_CREATION_DURATION = Histogram(
    "url_shortener_creation_duration_seconds",
    "Time taken to obtain short URLs",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)
TOKENS_GENERATED_TOTAL = Counter(
    "url_shortener_tokens_generated_total",
    "Total candidate tokens generated"
)
TOKEN_COLLISIONS_TOTAL = Counter(
    "url_shortener_token_collisions_total",
    "Total candidate tokens rejected by a uniqueness constraint",
    ["column"]
)


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================

class ShorteningService:
    """Creates idempotent short urls and resolves tokens back to original urls.

    Example:
        >>> service = ShorteningService.from_context(ctx)
        >>> await service.obtain_short_url("https://example.com/")
        'http://localhost:8080/aZ3k9QpL0x'
        >>> await service.resolve_original_url("aZ3k9QpL0x")
        'https://example.com/'
    """

    def __init__(
        self,
        registry: TokenRegistry,
        generator: RandomTokenGenerator,
        codec: UrlCodec,
        settings: Settings,
        logger: logging.Logger | logging.LoggerAdapter,
    ):
        self._registry = registry
        self._generator = generator
        self._codec = codec
        self._settings = settings
        self._logger = logger

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "ShorteningService":
        """Build a service from the per-request context.

        Args:
            ctx: Request context with the database session and shared resources

        Returns:
            ShorteningService: Service bound to the request's session and logger
        """
        return cls(
            registry=TokenRegistry(ctx.database),
            generator=ctx.token_generator,
            codec=UrlCodec(),
            settings=ctx.settings,
            logger=ctx.logger,
        )

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    async def obtain_short_url(self, original_url: str) -> str:
        """Return the public short url for ``original_url``, creating a token if needed.

        The url is validated before the database is touched.

        Raises:
            InvalidUrlError: ``original_url`` is not a syntactically valid url
            TokenCannotBeCreatedError: no unique token could be minted
        """
        start_time = time.perf_counter()

        try:
            self._logger.info(f"Obtaining short url for: {original_url}")

            if not self._codec.is_valid_url(original_url):
                raise InvalidUrlError(original_url)

            token = await self.find_or_create_token(original_url)
            short_url = self._codec.build_public_url(self._settings.BASE_URL, token)

            SHORT_URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
            self._logger.info(f"Short url obtained: {short_url} in {time.perf_counter() - start_time:.3f}s")
            return short_url

        except InvalidUrlError as exc:
            SHORT_URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.VALIDATION_ERROR).inc()
            self._logger.warning(f"Short url refused: {exc}")
            raise

        except Exception as exc:
            SHORT_URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(f"Short url creation error: {exc!r}")
            raise

        finally:
            SHORT_URL_CREATION_DURATION.observe(time.perf_counter() - start_time)

    async def find_or_create_token(self, original_url: str) -> str:
        """Return the token bound to ``original_url``, minting one when there is none.

        Raises:
            TokenCannotBeCreatedError: every attempt collided, or the generator
                produced a blank token
        """
        existing = await self._registry.find_by_original_url(original_url)
        if existing is not None:
            self._logger.info(f"Reusing token {existing.token} for: {original_url}")
            return existing.token

        max_attempts = require_strictly_positive(self._settings.TOKEN_MAX_ATTEMPTS, "TOKEN_MAX_ATTEMPTS")
        for attempt in range(1, max_attempts + 1):
            candidate = self._generator.generate(self._settings.TOKEN_CHARACTERS, self._settings.TOKEN_LENGTH)
            TOKENS_GENERATED_TOTAL.inc()

            if is_blank(candidate):
                self._logger.warning(f"Generated token {candidate!r} is blank for: {original_url}")
                raise TokenCannotBeCreatedError(original_url)

            outcome = await self._registry.try_create(original_url, candidate)
            if isinstance(outcome, Created):
                self._logger.info(f"Token {outcome.token} created for: {original_url} (attempt {attempt}/{max_attempts})")
                return outcome.token

            TOKEN_COLLISIONS_TOTAL.labels(column=outcome.column).inc()
            self._logger.warning(
                f"Token {candidate} rejected on {outcome.column} for: {original_url} (attempt {attempt}/{max_attempts})"
            )

            if outcome.column is UniqueColumn.ORIGINAL_URL:
                # Another request stored this url between our lookup and insert
                winner = outcome.existing or await self._registry.find_by_original_url(original_url)
                if winner is not None:
                    return winner.token

        self._logger.error(f"No unique token after {max_attempts} attempts for: {original_url}")
        raise TokenCannotBeCreatedError(original_url)

    async def resolve_original_url(self, token: str | None) -> str:
        """Return the original url bound to ``token``.

        Raises:
            InvalidTokenError: ``token`` is None, empty or blank
            TokenNotFoundError: no record holds ``token``
        """
        self._logger.info(f"Resolving token: {token!r}")

        if is_blank(token):
            SHORT_URL_RESOLUTION_REQUESTS_TOTAL.labels(status=RequestStatus.VALIDATION_ERROR).inc()
            raise InvalidTokenError(token)

        record = await self._registry.find_by_token(token)
        if record is None:
            SHORT_URL_RESOLUTION_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.warning(f"Token not found: {token}")
            raise TokenNotFoundError(token)

        SHORT_URL_RESOLUTION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        return record.original_url
