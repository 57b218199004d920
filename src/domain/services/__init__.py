"""Domain services of the lead-capture flows.

- Lead capture: contact submission and newsletter subscription orchestration,
  including the reCAPTCHA policy
"""

from .lead_capture import (
    CaptchaPolicy,
    ContactSubmissionService,
    NewsletterSubscriptionService,
)

__all__ = [
    "CaptchaPolicy",
    "ContactSubmissionService",
    "NewsletterSubscriptionService",
]
