"""Pydantic schemas for request/response validation in the URL shortener.

This module defines Pydantic models for API input validation and output serialization,
ensuring type safety and automatic OpenAPI documentation generation.

Schema Hierarchy
=================
::
    CreateShortUrlRequest (Input)
    └─ url: str (not blank)

    RestBasicResponse (Output)
    ├─ success: bool
    └─ error: str | None (omitted when None)

    CreateShortUrlResponse (Output, extends RestBasicResponse)
    └─ shortUrl: str

    DecodeShortUrlResponse (Output, extends RestBasicResponse)
    └─ originalCompleteUrl: str

    HealthResponse (Output)
    ├─ status: HealthStatus
    └─ database: HealthStatus

How to Use
===========
**Step 1 — Input validation**::
    @router.post("/")
    async def create_short_url(payload: CreateShortUrlRequest):
        # payload.url is present and not blank, but not yet checked as a url
        ...

**Step 2 — Response serialization**::
    return CreateShortUrlResponse(success=True, shortUrl=short_url)

Key Behaviours
===============
- Blank urls fail request validation; url syntax is checked by the service so
  that an invalid url maps to a dedicated error message.
- The ``error`` field only appears in failure responses (routes use
  ``response_model_exclude_none``).
- Field names are camelCase on the wire.

Classes:
    CreateShortUrlRequest:  Input schema for short url creation.
    RestBasicResponse:  Envelope shared by every response.
    CreateShortUrlResponse:  Output schema for created short urls.
    DecodeShortUrlResponse:  Output schema for decoded tokens.
    HealthResponse:  Output schema for health checks.
"""

from pydantic import BaseModel, Field, field_validator

from urlshortener.enums import HealthStatus

__all__ = [
    "CreateShortUrlRequest",
    "RestBasicResponse",
    "CreateShortUrlResponse",
    "DecodeShortUrlResponse",
    "HealthResponse",
]


class CreateShortUrlRequest(BaseModel):
    url: str = Field(..., description="Original url to shorten, e.g. 'https://example.com/page'")

    @field_validator("url")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("url must not be blank")
        return v


class RestBasicResponse(BaseModel):
    success: bool
    error: str | None = None


class CreateShortUrlResponse(RestBasicResponse):
    shortUrl: str


class DecodeShortUrlResponse(RestBasicResponse):
    originalCompleteUrl: str


class HealthResponse(BaseModel):
    status: HealthStatus
    database: HealthStatus
