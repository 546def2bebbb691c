"""TokenRegistry tests against an in-memory SQLite database."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urlshortener.enums import UniqueColumn
from urlshortener.exceptions import RequiredValueError, TokenCollisionError
from urlshortener.models import ShortUrl
from urlshortener.registry import Collision, Created, TokenRegistry


@pytest.fixture
def registry(db_session: AsyncSession) -> TokenRegistry:
    return TokenRegistry(db_session)


async def count_records(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(ShortUrl))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_find_on_empty_store(registry: TokenRegistry) -> None:
    assert await registry.find_by_token("abc") is None
    assert await registry.find_by_original_url("https://example.com/") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [None, "", "   "])
async def test_find_rejects_blank_values(registry: TokenRegistry, value) -> None:
    with pytest.raises(RequiredValueError):
        await registry.find_by_token(value)
    with pytest.raises(RequiredValueError):
        await registry.find_by_original_url(value)


@pytest.mark.asyncio
async def test_create_if_absent_persists_record(registry: TokenRegistry, db_session: AsyncSession) -> None:
    record = await registry.create_if_absent("https://example.com/", "abc")

    assert record.id is not None
    assert record.token == "abc"
    assert record.original_url == "https://example.com/"
    assert (await registry.find_by_token("abc")).id == record.id
    assert (await registry.find_by_original_url("https://example.com/")).id == record.id
    assert await count_records(db_session) == 1


@pytest.mark.asyncio
async def test_create_if_absent_assigns_distinct_ids(registry: TokenRegistry) -> None:
    first = await registry.create_if_absent("https://one.example/", "aaa")
    second = await registry.create_if_absent("https://two.example/", "bbb")
    assert first.id != second.id


@pytest.mark.asyncio
async def test_create_if_absent_rejects_used_token(registry: TokenRegistry, db_session: AsyncSession) -> None:
    await registry.create_if_absent("https://one.example/", "abc")

    with pytest.raises(TokenCollisionError) as exc_info:
        await registry.create_if_absent("https://two.example/", "abc")

    assert exc_info.value.token == "abc"
    assert exc_info.value.original_url == "https://two.example/"
    assert await count_records(db_session) == 1


@pytest.mark.asyncio
async def test_try_create_reports_created(registry: TokenRegistry) -> None:
    outcome = await registry.try_create("https://example.com/", "abc")
    assert isinstance(outcome, Created)
    assert outcome.token == "abc"
    assert outcome.record.id is not None


@pytest.mark.asyncio
async def test_try_create_token_collision_from_precheck(registry: TokenRegistry) -> None:
    await registry.create_if_absent("https://one.example/", "abc")

    outcome = await registry.try_create("https://two.example/", "abc")

    assert outcome == Collision("abc", UniqueColumn.TOKEN)


@pytest.mark.asyncio
async def test_try_create_token_collision_from_unique_constraint(
    registry: TokenRegistry, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    await registry.create_if_absent("https://one.example/", "abc")
    # The pre-check misses the row, as if a concurrent request inserted it just after
    monkeypatch.setattr(registry, "_token_in_use", AsyncMock(side_effect=[False, True]))

    outcome = await registry.try_create("https://two.example/", "abc")

    assert outcome == Collision("abc", UniqueColumn.TOKEN)
    assert await count_records(db_session) == 1


@pytest.mark.asyncio
async def test_try_create_original_url_collision_returns_existing(
    registry: TokenRegistry, db_session: AsyncSession
) -> None:
    winner = await registry.create_if_absent("https://example.com/", "abc")

    outcome = await registry.try_create("https://example.com/", "bca")

    assert isinstance(outcome, Collision)
    assert outcome.column is UniqueColumn.ORIGINAL_URL
    assert outcome.token == "bca"
    assert outcome.existing.id == winner.id
    assert outcome.existing.token == "abc"
    assert await count_records(db_session) == 1


@pytest.mark.asyncio
async def test_try_create_session_usable_after_collision(registry: TokenRegistry) -> None:
    await registry.create_if_absent("https://example.com/", "abc")
    await registry.try_create("https://example.com/", "bca")

    outcome = await registry.try_create("https://other.example/", "bca")

    assert isinstance(outcome, Created)


@pytest.mark.asyncio
async def test_try_create_reraises_unattributed_integrity_error(
    registry: TokenRegistry, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    failure = IntegrityError("INSERT INTO short_url", {}, Exception("check constraint failed"))
    monkeypatch.setattr(db_session, "commit", AsyncMock(side_effect=failure))

    with pytest.raises(IntegrityError):
        await registry.try_create("https://example.com/", "abc")


@pytest.mark.asyncio
async def test_try_create_rejects_blank_arguments(registry: TokenRegistry) -> None:
    with pytest.raises(RequiredValueError):
        await registry.try_create("", "abc")
    with pytest.raises(RequiredValueError):
        await registry.try_create("https://example.com/", " ")
