from .forms import CONTACT_FORM_RULES, EMAIL_PATTERN, NEWSLETTER_FORM_RULES
from .submission_validator import (
    FieldRule,
    SubmissionValidator,
    ValidatedSubmission,
    escape_markup,
    submission_validator,
)

__all__ = [
    "CONTACT_FORM_RULES",
    "EMAIL_PATTERN",
    "NEWSLETTER_FORM_RULES",
    "FieldRule",
    "SubmissionValidator",
    "ValidatedSubmission",
    "escape_markup",
    "submission_validator",
]
