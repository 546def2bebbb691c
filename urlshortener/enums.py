"""Shared enums for the URL shortener application.

This module defines all status and state enums used across the codebase.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["HealthStatus", "RequestStatus", "Requirement", "UniqueColumn"]


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class RequestStatus(StrEnum):
    """Request status values for metrics and logging."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    ERROR = "error"
    NOT_FOUND = "not_found"


class Requirement(StrEnum):
    """Requirement a value failed, used to build ``error.required.<value>`` message keys."""

    INVALID_FIELD = "InvalidField"
    NOT_NULL = "NotNull"
    NOT_EMPTY = "NotEmpty"
    NOT_BLANK = "NotBlank"
    NOT_NEGATIVE = "NotNegative"
    NOT_ZERO = "NotZero"


class UniqueColumn(StrEnum):
    """Unique column of the short_url table that rejected an insert."""

    TOKEN = "token"
    ORIGINAL_URL = "original_url"
