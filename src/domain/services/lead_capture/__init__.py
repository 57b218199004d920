"""Orchestration of the two public lead flows."""

from .captcha_policy import PLACEHOLDER_TOKEN, CaptchaPolicy
from .contact_service import ContactSubmissionService
from .newsletter_service import NewsletterSubscriptionService

__all__ = [
    "PLACEHOLDER_TOKEN",
    "CaptchaPolicy",
    "ContactSubmissionService",
    "NewsletterSubscriptionService",
]
