"""Field rules of the public lead-capture forms.

Field names match the JSON keys the marketing site posts.
"""

import re
from typing import Dict

from .submission_validator import FieldRule

# local@domain.tld, no whitespace and a single "@"
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PERSON_NAME_PATTERN = re.compile(r"[a-zA-Z\s'-]+")

EMAIL_MAX_LENGTH = 254

EMAIL_RULE = FieldRule(
    required=True,
    max_length=EMAIL_MAX_LENGTH,
    pattern=EMAIL_PATTERN,
    label="Email",
    messages={"pattern": "Please provide a valid email address."},
)

CONTACT_FORM_RULES: Dict[str, FieldRule] = {
    "fullName": FieldRule(
        required=True,
        min_length=2,
        max_length=100,
        pattern=PERSON_NAME_PATTERN,
        label="Full name",
        messages={
            "min_length": "Full name is too short",
            "max_length": "Full name is too long",
            "pattern": "Name contains invalid characters",
        },
    ),
    "email": EMAIL_RULE,
    "projectType": FieldRule(required=True, max_length=100, sanitize=True, label="Project type"),
    "priority": FieldRule(required=True, max_length=50, sanitize=True, label="Priority"),
    "projectScope": FieldRule(
        required=True,
        min_length=10,
        max_length=1000,
        sanitize=True,
        label="Project details",
        messages={
            "min_length": "Project details are too short",
            "max_length": "Project details are too long",
        },
    ),
    "implementationTimeframe": FieldRule(max_length=100, sanitize=True, label="Implementation timeframe"),
    "projectScale": FieldRule(max_length=100, sanitize=True, label="Project scale"),
}

NEWSLETTER_FORM_RULES: Dict[str, FieldRule] = {
    "email": EMAIL_RULE,
}
