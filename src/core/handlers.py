from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into appropriate HTTP responses.
"""

import math

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    CaptchaVerificationError,
    EmailServiceError,
    LeadgateError,
    PermissionError,
    RateLimitError,
    StorageUnavailableError,
    SubmissionValidationError,
    ValidationError,
)

__all__ = [
    "submission_validation_error_handler",
    "request_validation_error_handler",
    "captcha_verification_error_handler",
    "validation_error_handler",
    "rate_limit_error_handler",
    "storage_unavailable_error_handler",
    "email_service_error_handler",
    "permission_error_handler",
    "leadgate_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

STORAGE_UNAVAILABLE_DETAIL = "Service temporarily unavailable, please try again later."
INTERNAL_ERROR_DETAIL = "An unexpected error occurred."


async def submission_validation_error_handler(
    request: Request, exc: SubmissionValidationError
) -> JSONResponse:
    """Handles `SubmissionValidationError`, returning a `400 Bad Request`.

    The body lists one reason per offending field so the form can highlight
    them.

    Args:
        request: The incoming `Request` object.
        exc: The `SubmissionValidationError` instance.

    Returns:
        A `JSONResponse` with a 400 status code, error detail and field errors.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "field_errors": exc.field_errors},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handles FastAPI's `RequestValidationError` (body is not a JSON object of
    scalar fields), returning a `400 Bad Request` like any other invalid form.
    """
    logger.info("request_body_invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body."},
    )


async def captcha_verification_error_handler(
    request: Request, exc: CaptchaVerificationError
) -> JSONResponse:
    """Handles `CaptchaVerificationError`, returning a `400 Bad Request`."""
    logger.warning("captcha_verification_failed", code=exc.code, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles any other `ValidationError`, returning a `400 Bad Request`."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handles `RateLimitError`, returning a `429 Too Many Requests`.

    ``Retry-After`` carries the whole seconds until the client's window resets.

    Args:
        request: The incoming `Request` object.
        exc: The `RateLimitError` instance.

    Returns:
        A `JSONResponse` with a 429 status code and error detail.
    """
    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(max(1, math.ceil(exc.retry_after)))
    logger.warning("rate_limit_exceeded", path=request.url.path, retry_after=exc.retry_after)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": exc.message},
        headers=headers,
    )


async def storage_unavailable_error_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    """Handles `StorageUnavailableError`, returning a `503 Service Unavailable`.

    The internal message is logged, never returned.
    """
    logger.error("storage_unavailable", code=exc.code, error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": STORAGE_UNAVAILABLE_DETAIL},
    )


async def email_service_error_handler(request: Request, exc: EmailServiceError) -> JSONResponse:
    """Handles `EmailServiceError`, returning a `500 Internal Server Error`.

    The lead flows swallow delivery failures, so reaching this handler means
    the e-mail service could not even be configured.
    """
    logger.error("email_service_error", code=exc.code, error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


async def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    """Handles `PermissionError`, returning a `403 Forbidden`."""
    logger.warning(
        "Permission denied",
        error=exc.code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": str(exc)},
    )


async def leadgate_error_handler(request: Request, exc: LeadgateError) -> JSONResponse:
    """Fallback for any `LeadgateError` without a specific handler, returning a `500`."""
    logger.error("unhandled_application_error", code=exc.code, error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Starlette picks the handler of the closest class in the exception's MRO,
    so the subclasses registered here win over ``LeadgateError``.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_exception_handler(SubmissionValidationError, submission_validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(CaptchaVerificationError, captcha_verification_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitError, rate_limit_error_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_error_handler)
    app.add_exception_handler(EmailServiceError, email_service_error_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
    app.add_exception_handler(LeadgateError, leadgate_error_handler)
