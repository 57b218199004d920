from .requests import ContactRequest, FormRequest, NewsletterRequest
from .responses import (
    ContactAcceptedResponse,
    ContactListResponse,
    ContactSubmissionResponse,
    HealthResponse,
    NewsletterAcceptedResponse,
)

__all__ = [
    "ContactAcceptedResponse",
    "ContactListResponse",
    "ContactRequest",
    "ContactSubmissionResponse",
    "FormRequest",
    "HealthResponse",
    "NewsletterAcceptedResponse",
    "NewsletterRequest",
]
