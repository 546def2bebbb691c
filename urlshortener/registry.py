"""Persistence-facing access to the short_url table.

The registry offers the three operations the shortening service needs: lookup
by token, lookup by original url, and an atomic insert that reports collisions
instead of leaking storage errors.

Insert Flow — try_create()
==========================
::
    ┌──────────────┐
    │ token already │──yes──► Collision(TOKEN)
    │ used? (read)  │
    └──────┬───────┘
           │ no
           ▼
    ┌──────────────┐
    │ INSERT +      │──ok──► Created(record)
    │ COMMIT        │
    └──────┬───────┘
           │ IntegrityError
           ▼
    ┌──────────────┐
    │ ROLLBACK,     │──url row exists──► Collision(ORIGINAL_URL, existing)
    │ find the      │──token row exists─► Collision(TOKEN)
    │ violated key  │──neither──────────► re-raise
    └──────────────┘

The read before the insert only saves a round trip in the common case; the
unique constraints decide when two requests race.
"""

from dataclasses import dataclass

from prometheus_client import Counter
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urlshortener.arguments import require_non_blank
from urlshortener.enums import UniqueColumn
from urlshortener.exceptions import TokenCollisionError
from urlshortener.models import ShortUrl

__all__ = ["Created", "Collision", "InsertOutcome", "TokenRegistry"]


DATABASE_READS_TOTAL = Counter(
    "url_shortener_database_reads_total",
    "Total database read operations"
)
DATABASE_WRITES_TOTAL = Counter(
    "url_shortener_database_writes_total",
    "Total database write operations"
)


@dataclass(frozen=True)
class Created:
    record: ShortUrl

    @property
    def token(self) -> str:
        return self.record.token


@dataclass(frozen=True)
class Collision:
    token: str
    column: UniqueColumn
    existing: ShortUrl | None = None


InsertOutcome = Created | Collision


class TokenRegistry:
    """Reads and writes ShortUrl records through one async session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def find_by_token(self, token: str) -> ShortUrl | None:
        require_non_blank(token, "token")
        return await self._find_one(ShortUrl.token == token)

    async def find_by_original_url(self, original_url: str) -> ShortUrl | None:
        require_non_blank(original_url, "original_url")
        return await self._find_one(ShortUrl.original_url == original_url)

    async def create_if_absent(self, original_url: str, candidate_token: str) -> ShortUrl:
        """Persist ``(candidate_token, original_url)`` and return the new record.

        Raises:
            TokenCollisionError: the token or the url is already bound to a record.
        """
        outcome = await self.try_create(original_url, candidate_token)
        if isinstance(outcome, Collision):
            raise TokenCollisionError(outcome.token, original_url)
        return outcome.record

    async def try_create(self, original_url: str, candidate_token: str) -> InsertOutcome:
        """Insert a new record, reporting a unique-constraint conflict as a Collision.

        Storage failures other than a unique-constraint violation propagate.
        """
        require_non_blank(original_url, "original_url")
        require_non_blank(candidate_token, "candidate_token")

        if await self._token_in_use(candidate_token):
            return Collision(candidate_token, UniqueColumn.TOKEN)

        record = ShortUrl(token=candidate_token, original_url=original_url)
        self._db.add(record)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            collision = await self._attribute_violation(original_url, candidate_token)
            if collision is None:
                raise
            return collision
        DATABASE_WRITES_TOTAL.inc()

        await self._db.refresh(record)
        return Created(record)

    async def _attribute_violation(self, original_url: str, candidate_token: str) -> Collision | None:
        existing = await self.find_by_original_url(original_url)
        if existing is not None:
            return Collision(candidate_token, UniqueColumn.ORIGINAL_URL, existing)
        if await self._token_in_use(candidate_token):
            return Collision(candidate_token, UniqueColumn.TOKEN)
        return None

    async def _token_in_use(self, token: str) -> bool:
        return await self._find_one(ShortUrl.token == token) is not None

    async def _find_one(self, criterion) -> ShortUrl | None:
        result = await self._db.execute(select(ShortUrl).where(criterion))
        DATABASE_READS_TOTAL.inc()
        return result.scalar_one_or_none()
