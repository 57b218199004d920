"""Subscription Domain Entities

Entities:
- SubscriptionRecord: one completed one-time action (e.g. a newsletter sign-up)
  for a normalised identity
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def normalize_identity(identity: str) -> str:
    """Trim and lower-case an identity so ``A@B.com `` and ``a@b.com`` collide."""
    return identity.strip().lower()


@dataclass(frozen=True, slots=True)
class SubscriptionRecord:
    """Immutable record of a completed one-time action.

    Business Rules:
    - ``identity`` is already normalised
    - At most one record exists per identity; stores enforce it
    - Records are never mutated and never deleted by the application
    """

    identity: str
    recorded_at: datetime
    source: str

    def __post_init__(self):
        if not self.identity:
            raise ValueError("Subscription identity cannot be empty")
        if self.identity != normalize_identity(self.identity):
            raise ValueError("Subscription identity must be normalised")
