"""Export lead-capture domain entities for use across the application.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from .contact_submission import ContactLead, ContactStatus, ContactSubmission
from .newsletter_subscription import NewsletterSubscription

__all__ = ["ContactLead", "ContactStatus", "ContactSubmission", "NewsletterSubscription"]
