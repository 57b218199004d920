"""
Rate Limiting Value Objects

Immutable value objects representing the outcome of a throttle check.

Value Objects:
- ThrottleDecision: allowed / rate-limit-exceeded outcome of ``allow()``
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ThrottleDecision:
    """
    Outcome of a single ``allow(identifier)`` call.

    A rejected decision is an expected result, not an error: the caller turns
    it into a "too many requests" response and never retries it.

    Attributes:
        identifier: The throttled key (e.g. ``newsletter:203.0.113.7``)
        allowed: Whether the attempt was admitted
        count: Attempts recorded in the current window, including this one if allowed
        limit: Ceiling of the window
        retry_after: Seconds until the window resets
    """
    identifier: str
    allowed: bool
    count: int
    limit: int
    retry_after: float

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.count)

    @property
    def exceeded(self) -> bool:
        return not self.allowed

    @classmethod
    def admit(cls, identifier: str, count: int, limit: int, retry_after: float) -> ThrottleDecision:
        return cls(identifier=identifier, allowed=True, count=count, limit=limit, retry_after=retry_after)

    @classmethod
    def reject(cls, identifier: str, count: int, limit: int, retry_after: float) -> ThrottleDecision:
        return cls(identifier=identifier, allowed=False, count=count, limit=limit, retry_after=retry_after)
