"""FastAPI application entry point for the URL shortener service.

This module configures and initializes the FastAPI application with middleware,
lifecycle management, exception handlers and route registration.

Application Lifecycle Diagram
=============================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌──────────────┐
    │ Create FastAPI│
    │ app instance  │
    └──────┬───────┘
           ▼
    ┌─────────────┐
    │ Middleware, │
    │ handlers,   │
    │ routes      │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ init_db()   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ close_db()  │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn urlshortener.main:app --host 0.0.0.0 --port 8080

**Step 2 — Shorten a url**::
    curl -X POST http://localhost:8080/ \
         -H "Content-Type: application/json" \
         -d '{"url": "https://example.com"}'

**Step 3 — Decode a token**::
    curl http://localhost:8080/aZ3k9QpL0x?lang=fr

Configuration:
    The app uses environment variables for configuration.
    See urlshortener/config.py for all available settings.
"""

__all__ = ["app"]

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from urlshortener.config import get_settings
from urlshortener.database import close_db, init_db
from urlshortener.dependencies import _service_manager
from urlshortener.handlers import register_exception_handlers
from urlshortener.routes import router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    _service_manager.initialize()
    await init_db()
    yield
    # Shutdown
    _service_manager.cleanup()
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Shortens urls into random tokens and decodes them back",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=False,
    should_respect_env_var=False,
).instrument(app).expose(app)

register_exception_handlers(app)

app.include_router(router)
