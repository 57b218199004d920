"""Subscription Value Objects

- RegistrationStatus: outcome kinds of ``register_if_new``
- RegistrationResult: outcome plus the record that was written, if any
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .entities import SubscriptionRecord


class RegistrationStatus(str, Enum):
    """Outcome of a registration attempt.

    ALREADY_EXISTS is not a failure: the guard exists to make a repeated
    attempt idempotent. Storage outages are raised, never returned.
    """
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    status: RegistrationStatus
    identity: str
    record: Optional[SubscriptionRecord] = None

    @property
    def created(self) -> bool:
        return self.status is RegistrationStatus.CREATED

    @classmethod
    def new(cls, record: SubscriptionRecord) -> RegistrationResult:
        return cls(RegistrationStatus.CREATED, record.identity, record)

    @classmethod
    def existing(cls, identity: str) -> RegistrationResult:
        return cls(RegistrationStatus.ALREADY_EXISTS, identity)
