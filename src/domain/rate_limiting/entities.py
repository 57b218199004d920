"""Rate Limiting Domain Entities

Entities:
- ThrottleWindow: request history of one identifier over its current window

A window is created on the first request of an identifier, counts up while the
window is open and is discarded (never decremented) once it expires.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ThrottleWindow:
    """Entity tracking how many attempts an identifier made in its current window.

    Business Rules:
    - ``count`` only increases within ``[window_started_at, window_started_at + interval)``
    - An expired window is evicted, a later request opens a fresh one
    """

    identifier: str
    count: int
    window_started_at: float

    def __post_init__(self):
        if self.count < 0:
            raise ValueError("Window count cannot be negative")

    def is_expired(self, now: float, interval: float) -> bool:
        return now - self.window_started_at >= interval

    def resets_at(self, interval: float) -> float:
        return self.window_started_at + interval

    def seconds_until_reset(self, now: float, interval: float) -> float:
        return max(0.0, self.resets_at(interval) - now)

    def copy(self) -> ThrottleWindow:
        return ThrottleWindow(self.identifier, self.count, self.window_started_at)
