"""Duplicate-subscription guard: one-time actions keyed by a normalised identity."""

from .entities import SubscriptionRecord, normalize_identity
from .repositories import SubscriptionStore
from .services import SubscriptionGuard
from .value_objects import RegistrationResult, RegistrationStatus

__all__ = [
    "RegistrationResult",
    "RegistrationStatus",
    "SubscriptionGuard",
    "SubscriptionRecord",
    "SubscriptionStore",
    "normalize_identity",
]
