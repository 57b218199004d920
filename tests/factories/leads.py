from __future__ import annotations

"""Factories for generating fake form payloads for testing."""

import re
from typing import Any, Dict

from faker import Faker

fake = Faker("en_US")

_NAME = re.compile(r"[a-zA-Z\s'-]+")


def fake_full_name() -> str:
    """A name the contact form accepts (letters, spaces, apostrophes, hyphens)."""
    for _ in range(10):
        name = f"{fake.first_name()} {fake.last_name()}"
        if _NAME.fullmatch(name):
            return name
    return "Jane Doe"


def make_contact_payload(**overrides: Any) -> Dict[str, Any]:
    """A valid contact form body; keyword arguments replace or add fields."""
    payload = {
        "fullName": fake_full_name(),
        "email": fake.email(),
        "projectType": "Web Application",
        "priority": "High",
        "projectScope": f"We need a new customer portal for {fake.company()} within the next quarter.",
        "implementationTimeframe": "3-6 months",
        "projectScale": "Medium",
    }
    payload.update(overrides)
    return payload


def make_newsletter_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {"email": fake.email()}
    payload.update(overrides)
    return payload
