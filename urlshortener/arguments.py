"""Argument guards raising RequiredValueError on contract violations."""

from typing import Any

from urlshortener.enums import Requirement
from urlshortener.exceptions import RequiredValueError

__all__ = ["is_blank", "require_non_blank", "require_not_none", "require_strictly_positive"]


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def require_not_none(value: Any, field_name: str) -> Any:
    if value is None:
        raise RequiredValueError(field_name, Requirement.NOT_NULL)
    return value


def require_non_blank(value: str | None, field_name: str) -> str:
    require_not_none(value, field_name)
    if not isinstance(value, str):
        raise RequiredValueError(field_name, Requirement.INVALID_FIELD)
    if value == "":
        raise RequiredValueError(field_name, Requirement.NOT_EMPTY)
    if not value.strip():
        raise RequiredValueError(field_name, Requirement.NOT_BLANK)
    return value


def require_strictly_positive(value: int | None, field_name: str) -> int:
    require_not_none(value, field_name)
    if value < 0:
        raise RequiredValueError(field_name, Requirement.NOT_NEGATIVE)
    if value == 0:
        raise RequiredValueError(field_name, Requirement.NOT_ZERO)
    return value
