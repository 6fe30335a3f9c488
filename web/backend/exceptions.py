#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from typing import Any, Dict, Optional
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    status_code = 500

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class ValidationException(ServiceException):
    """Raised for malformed or out-of-range input."""
    status_code = 400


class AuthenticationException(ServiceException):
    """Raised when a token or credentials are missing, invalid or expired."""
    status_code = 401


class ForbiddenException(ServiceException):
    """Raised when the caller lacks rights over the resource."""
    status_code = 403


class NotFoundException(ServiceException):
    """Raised when an entity is absent or not visible to the caller."""
    status_code = 404


class ConflictException(ServiceException):
    """Raised on uniqueness or state-precondition violations."""
    status_code = 409


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"{exc.__class__.__name__} in {request.url.path}: {exc}")

    content = {
        "success": False,
        "error": exc.message,
        "type": exc.__class__.__name__
    }
    content.update(exc.extra)

    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field details."""
    details = []
    for err in exc.errors():
        location = [str(part) for part in err.get('loc', ()) if part not in ('body', 'query', 'path')]
        details.append({
            "field": ".".join(location),
            "message": err.get('msg', 'Invalid value')
        })

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation error",
            "type": "ValidationException",
            "details": details
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        },
        headers=getattr(exc, 'headers', None)
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions without leaking internals.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
