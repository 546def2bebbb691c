"""FastAPI route definitions for the URL shortener REST API.

API Endpoint Overview
=====================
::
    GET  /health
        └─ HealthResponse (200)

    POST /
        ├─ CreateShortUrlRequest (request body)
        └─ CreateShortUrlResponse (200) or 400/500

    GET  /
        └─ 400 (no token given)

    GET  /:token
        └─ DecodeShortUrlResponse (200) or 400/404

Request Flow Diagram
====================
::
    ┌─────────────┐
    │  HTTP       │
    │  Request    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Validate &  │
    │ Parse       │
    │ (Pydantic)  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Inject      │
    │ Context &   │
    │ Service     │
    └──────┬──────┘
           ▼
    ┌─────────────┐      error      ┌─────────────┐
    │ Call Service│────────────────►│ Exception   │
    │ Layer       │                 │ handlers    │
    └──────┬──────┘                 └─────────────┘
           ▼
    ┌─────────────┐
    │ Serialize   │
    │ Response    │
    └─────────────┘

Key Behaviours
===============
- Every response carries ``success``; ``error`` is only present on failures.
- Failures are rendered by ``urlshortener.handlers`` in the ``?lang=`` locale.
- /health is declared before /{token} so it is never read as a token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text

from urlshortener.dependencies import RequestContext, get_request_context, get_shortening_service
from urlshortener.enums import HealthStatus
from urlshortener.schemas import CreateShortUrlRequest, CreateShortUrlResponse, DecodeShortUrlResponse, HealthResponse
from urlshortener.service import ShorteningService

__all__ = ["router"]

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(ctx: RequestContext = Depends(get_request_context)) -> HealthResponse:
    ctx.logger.info("Health check requested")
    db_status = HealthStatus.HEALTHY

    try:
        await ctx.database.execute(text("SELECT 1"))
        ctx.logger.debug("Database health check passed")
    except Exception as e:
        ctx.logger.error(f"Database health check failed: {e}")
        db_status = HealthStatus.UNHEALTHY

    ctx.logger.info(f"Health check completed: {db_status.value}")
    return HealthResponse(status=db_status, database=db_status)


@router.post("/", response_model=CreateShortUrlResponse, response_model_exclude_none=True, tags=["urls"])
async def create_short_url(
    payload: CreateShortUrlRequest,
    ctx: RequestContext = Depends(get_request_context),
    service: ShorteningService = Depends(get_shortening_service),
) -> CreateShortUrlResponse:
    ctx.logger.info(
        f"Short url requested: {payload.url}",
        extra={"operation": "create_short_url", "target_url": payload.url},
    )

    short_url = await service.obtain_short_url(payload.url)

    ctx.logger.info(
        f"Short url returned: {short_url}",
        extra={"operation": "create_short_url", "short_url": short_url, "duration_ms": ctx.get_duration()},
    )
    return CreateShortUrlResponse(success=True, shortUrl=short_url)


@router.get("/", response_model=DecodeShortUrlResponse, response_model_exclude_none=True, tags=["urls"])
async def decode_without_token(
    service: ShorteningService = Depends(get_shortening_service),
) -> DecodeShortUrlResponse:
    # Always rejected as an invalid token; keeps GET / from answering 405
    original_url = await service.resolve_original_url("")
    return DecodeShortUrlResponse(success=True, originalCompleteUrl=original_url)


@router.get("/{token}", response_model=DecodeShortUrlResponse, response_model_exclude_none=True, tags=["urls"])
async def decode_short_url(
    token: str,
    ctx: RequestContext = Depends(get_request_context),
    service: ShorteningService = Depends(get_shortening_service),
) -> DecodeShortUrlResponse:
    ctx.logger.info(
        f"Decode requested for token: {token}",
        extra={"operation": "decode", "token": token, "client_ip": ctx.client_ip},
    )

    original_url = await service.resolve_original_url(token)

    ctx.logger.info(
        f"Decode successful: {token} -> {original_url}",
        extra={"operation": "decode", "token": token, "duration_ms": ctx.get_duration()},
    )
    return DecodeShortUrlResponse(success=True, originalCompleteUrl=original_url)
