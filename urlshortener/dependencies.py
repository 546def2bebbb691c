"""Dependency injection with a singleton service manager.

This module provides a centralized way to inject the database session, the
settings, the token generator and a request-scoped logger into the API
endpoints, using a singleton for the resources shared by every request.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from urlshortener.config import Settings, get_settings
from urlshortener.database import get_db
from urlshortener.service import ShorteningService
from urlshortener.tokens import RandomTokenGenerator

__all__ = [
    "LOGGER_NAME",
    "ServiceManager",
    "RequestContext",
    "RequestLoggerAdapter",
    "get_service_manager",
    "get_token_generator",
    "get_request_context",
    "get_shortening_service",
]

LOGGER_NAME = "urlshortener"


# ============================================================================
# SINGLETON SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Singleton service manager for shared resources.

    Holds what does not need to be created per request: the settings, the
    configured logger and the token generator with its OS random source.
    """

    _instance: Optional["ServiceManager"] = None
    _initialized: bool = False

    def __new__(cls) -> "ServiceManager":
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self) -> None:
        """Initialize shared resources once at startup."""
        if not self._initialized:
            self.settings = get_settings()
            self.logger = self._setup_logger()
            self.token_generator = RandomTokenGenerator()
            self._initialized = True

    def _setup_logger(self) -> logging.Logger:
        """Setup logger once."""
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(self.settings.LOG_LEVEL.upper())
        return logger

    def cleanup(self) -> None:
        """Release shared resources at shutdown."""
        self._initialized = False


# Global singleton instance
_service_manager = ServiceManager()


# ============================================================================
# REQUEST CONTEXT
# ============================================================================


class RequestLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that keeps per-call ``extra`` fields next to the request context."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


@dataclass
class RequestContext:
    """Per-request context with tracking information and shared resources.

    Attributes:
        database: Async database session (only per-request resource)
        service_manager: Singleton service manager with shared resources
        settings: Application settings
        token_generator: Shared token generator
        request_id: Unique identifier for this request
        trace_id: Correlation ID for distributed tracing
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
    """

    database: AsyncSession
    service_manager: ServiceManager
    settings: Settings
    token_generator: RandomTokenGenerator
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    trace_id: Optional[str] = None
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Get shared logger with request context."""
        return RequestLoggerAdapter(
            self.service_manager.logger,
            {
                "request_id": self.request_id,
                "trace_id": self.trace_id or self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
            },
        )

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_service_manager() -> ServiceManager:
    """Get the singleton service manager, initializing it on first use."""
    if not _service_manager._initialized:
        _service_manager.initialize()
    return _service_manager


def get_token_generator(manager: ServiceManager = Depends(get_service_manager)) -> RandomTokenGenerator:
    return manager.token_generator


def get_request_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
    manager: ServiceManager = Depends(get_service_manager),
    settings: Settings = Depends(get_settings),
    token_generator: RandomTokenGenerator = Depends(get_token_generator),
) -> RequestContext:
    """Build the request context.

    Args:
        request: FastAPI Request object for extracting client info
        db: Database session (only per-request resource)
        manager: Singleton service manager with shared resources
        settings: Application settings
        token_generator: Shared token generator

    Returns:
        RequestContext: Context for the request
    """
    return RequestContext(
        database=db,
        service_manager=manager,
        settings=settings,
        token_generator=token_generator,
        trace_id=request.headers.get("x-trace-id"),
        user_agent=request.headers.get("user-agent"),
        client_ip=request.client.host if request.client else None,
    )


def get_shortening_service(ctx: RequestContext = Depends(get_request_context)) -> ShorteningService:
    """Create the shortening service bound to the request context."""
    return ShorteningService.from_context(ctx)
