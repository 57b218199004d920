from __future__ import annotations

"""Centralized, structured exception hierarchy for leadgate.

This module defines the custom exceptions of the application. They carry a
machine-readable `code` for programmatic error handling and a human-readable
`message` for logging and user feedback.

The hierarchy is designed to:
- Provide clear, specific errors for the failure scenarios of the lead flows.
- Map cleanly to HTTP status codes in the API layer (see ``core.handlers``).
- Keep expected outcomes (throttled, invalid, already subscribed) apart from
  infrastructure failures (storage unavailable, email delivery).
"""

from typing import Dict, Final, Mapping, Optional

__all__: Final = [
    "LeadgateError",
    "ValidationError",
    "SubmissionValidationError",
    "CaptchaVerificationError",
    "RateLimitError",
    "RateLimitExceededError",
    "StorageUnavailableError",
    "SpreadsheetError",
    "EmailServiceError",
    "TemplateRenderError",
    "PermissionError",
]


class LeadgateError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code for identifying
                    the type of error programmatically.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Validation errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(LeadgateError):
    """Raised for general data validation failures.

    This serves as a base for more specific validation errors and maps to a
    `400 Bad Request`.
    """

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class SubmissionValidationError(ValidationError):
    """Raised when a form submission fails its field rules.

    Carries the per-field reasons so the client can highlight the offending
    inputs. Expected and user-facing; never retried.
    """

    def __init__(
        self,
        field_errors: Mapping[str, str],
        message: str = "Please correct the highlighted fields.",
        code: str = "submission_invalid",
    ):
        super().__init__(message, code)
        self.field_errors: Dict[str, str] = dict(field_errors)


class CaptchaVerificationError(ValidationError):
    """Raised when the bot-mitigation token is missing or rejected."""

    def __init__(self, message: str = "reCAPTCHA verification failed", code: str = "captcha_failed"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Operational errors (429 Too Many Requests, 503 Service Unavailable)
# ---------------------------------------------------------------------------


class RateLimitError(LeadgateError):
    """Base class for rate limiting related errors.

    This exception and its subclasses map to a `429 Too Many Requests` HTTP
    status code.
    """

    def __init__(
        self,
        message: str | None = None,
        code: str = "rate_limit_exceeded",
        retry_after: Optional[float] = None,
    ):
        if message is None:
            message = "Too many requests, please try again later."
        super().__init__(message, code)
        self.retry_after = retry_after


class RateLimitExceededError(RateLimitError):
    """Raised when a client exceeded the submission limit of its current window.

    ``retry_after`` holds the seconds until the window resets, used for the
    ``Retry-After`` response header.
    """

    def __init__(
        self,
        message: str | None = None,
        code: str = "rate_limit_exceeded",
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, code, retry_after)


class StorageUnavailableError(LeadgateError):
    """Raised when a backing store cannot be reached or refuses an operation.

    Kept distinct from an "already exists" outcome so callers never confuse an
    outage with a duplicate. Maps to `503 Service Unavailable`.
    """

    def __init__(self, message: str = "Storage is temporarily unavailable.", code: str = "storage_unavailable"):
        super().__init__(message, code)


class SpreadsheetError(StorageUnavailableError):
    """Raised when the Google Sheets API call fails or is misconfigured."""

    def __init__(self, message: str, code: str = "spreadsheet_error"):
        super().__init__(message, code)


class EmailServiceError(LeadgateError):
    """Raised when there is an issue with the email sending service.

    This could be due to configuration issues, network problems, or provider
    outages. The lead flows log it and keep the submission.
    """

    def __init__(self, message: str, code: str = "email_service_error"):
        super().__init__(message, code)


class TemplateRenderError(EmailServiceError):
    """Raised when an email template fails to render."""

    def __init__(self, message: str, code: str = "template_render_error"):
        super().__init__(message, code)


class PermissionError(LeadgateError):
    """Raised when a caller is not allowed to use an operational endpoint.

    Maps to `403 Forbidden`.
    """

    def __init__(self, message: str = "Not allowed.", code: str = "permission_denied"):
        super().__init__(message, code)
