"""Exception handlers mapping errors to the ``{"success": false, "error": ...}`` envelope.

Status Mapping
==============
::
    InvalidUrlError, InvalidTokenError            400
    InvalidJsonBodyError, InvalidContentTypeError 400
    RequestValidationError (bad request body)     400
    TokenNotFoundError                            404
    RequiredValueError (raised by the core)       500, logged
    TokenCannotBeCreatedError                     500
    anything else                                 500, logged
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from urlshortener.config import Settings, get_settings
from urlshortener.dependencies import LOGGER_NAME
from urlshortener.enums import Requirement
from urlshortener.exceptions import (
    InvalidContentTypeError,
    InvalidJsonBodyError,
    InvalidTokenError,
    InvalidUrlError,
    RequiredValueError,
    ShortenerError,
    TokenCannotBeCreatedError,
    TokenNotFoundError,
)
from urlshortener.messages import localize, resolve_locale
from urlshortener.schemas import RestBasicResponse

__all__ = ["register_exception_handlers", "status_code_for", "validation_error_to_shortener_error"]

logger = logging.getLogger(LOGGER_NAME)

_STATUS_CODES: dict[type[ShortenerError], int] = {
    InvalidUrlError: 400,
    InvalidTokenError: 400,
    InvalidJsonBodyError: 400,
    InvalidContentTypeError: 400,
    TokenNotFoundError: 404,
    TokenCannotBeCreatedError: 500,
    RequiredValueError: 500,
}

# pydantic error types reported when a field is null
_NULL_ERROR_TYPES = {"string_type", "none_required"}


def status_code_for(error: ShortenerError) -> int:
    for error_type in type(error).__mro__:
        if error_type in _STATUS_CODES:
            return _STATUS_CODES[error_type]
    return 500


def _request_settings(request: Request) -> Settings:
    # Same provider the routes get through Depends(get_settings), overrides included
    provider = request.app.dependency_overrides.get(get_settings, get_settings)
    return provider()


def _error_response(request: Request, error: ShortenerError, status_code: int) -> JSONResponse:
    locale = resolve_locale(request.query_params.get("lang"), _request_settings(request).DEFAULT_LOCALE)
    body = RestBasicResponse(success=False, error=localize(error, locale))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def validation_error_to_shortener_error(errors: list[dict[str, Any]], content_type: str | None) -> ShortenerError:
    """Translate FastAPI request validation errors into a domain error."""
    body_errors = [error for error in errors if error.get("loc", ())[:1] == ("body",)]
    if body_errors and content_type and "json" not in content_type.lower():
        return InvalidContentTypeError(content_type)

    for error in errors:
        loc = tuple(error.get("loc", ()))
        error_type = error.get("type", "")
        if error_type == "json_invalid":
            return InvalidJsonBodyError(error.get("msg"))
        if len(loc) == 2 and loc[0] in ("body", "query", "path"):
            field_name = str(loc[1])
            if error_type == "missing" or (error_type in _NULL_ERROR_TYPES and error.get("input") is None):
                return RequiredValueError(field_name, Requirement.NOT_NULL)
            if error_type == "value_error":
                return RequiredValueError(field_name, Requirement.NOT_BLANK)
            return RequiredValueError(field_name, Requirement.INVALID_FIELD)

    return InvalidJsonBodyError(str(errors))


async def on_shortener_error(request: Request, exc: ShortenerError) -> JSONResponse:
    status_code = status_code_for(exc)
    if isinstance(exc, RequiredValueError):
        logger.error(f"An unexpected RequiredValueError has occurred : {exc!r}", exc_info=exc)
    elif status_code >= 500:
        logger.error(f"Request failed : {exc!r}")
    return _error_response(request, exc, status_code)


async def on_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_to_shortener_error(list(exc.errors()), request.headers.get("content-type"))
    logger.warning(f"Request rejected : {error!r}")
    return _error_response(request, error, 400)


async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"An error has occurred : {exc!r}", exc_info=exc)
    body = RestBasicResponse(success=False, error=f"An unexpected error has occurred : {exc!r}")
    return JSONResponse(status_code=500, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortenerError, on_shortener_error)
    app.add_exception_handler(RequestValidationError, on_request_validation_error)
    app.add_exception_handler(Exception, on_unexpected_error)
