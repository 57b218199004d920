"""
Rate Limiting Domain Services

Services:
- RequestThrottle: contract shared by every throttle backend
- FixedWindowThrottle: in-process fixed-window counter

Algorithm (fixed window):
1. Prune windows whose interval elapsed
2. Unknown identifier: open a window with count 1 and admit
3. count < limit: increment and admit
4. count >= limit: reject without touching the window

Across a window boundary up to ``2 x limit`` attempts can pass; in exchange
each identifier costs O(1) memory and O(1) amortized time. State is local to
the process: several instances behind a load balancer each enforce their own
limit.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional

import structlog

from .entities import ThrottleWindow
from .value_objects import ThrottleDecision

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]


class RequestThrottle(ABC):
    """Contract for throttles guarding the public submission endpoints."""

    limit: int
    interval: float

    @abstractmethod
    def allow(self, identifier: str) -> ThrottleDecision:
        """Record an attempt for ``identifier`` and decide whether it may proceed.

        Never suspends and never raises for an exceeded limit; a rejection is
        returned as a decision with ``allowed=False``.
        """

    @abstractmethod
    def reset(self, identifier: str) -> None:
        """Forget the current window of ``identifier``."""


class FixedWindowThrottle(RequestThrottle):
    """In-memory fixed-window throttle.

    Windows are kept in an ``OrderedDict`` in the order they were opened. A
    window is only ever re-created after its predecessor was removed, so the
    front of the dict always holds the oldest window: pruning stops at the
    first live entry and eviction pops the front.

    The whole check-and-update runs under one lock, so two concurrent attempts
    can never both observe ``count < limit`` for the last free slot.
    """

    def __init__(
        self,
        limit: int,
        interval: float,
        max_tracked_identifiers: Optional[int] = None,
        clock: Clock = time.monotonic,
        name: str = "default",
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if interval <= 0:
            raise ValueError("interval must be positive")
        if max_tracked_identifiers is not None and max_tracked_identifiers < 1:
            raise ValueError("max_tracked_identifiers must be at least 1")

        self.limit = limit
        self.interval = interval
        self.max_tracked_identifiers = max_tracked_identifiers
        self.name = name
        self._clock = clock
        self._windows: "OrderedDict[str, ThrottleWindow]" = OrderedDict()
        self._lock = threading.Lock()

    def allow(self, identifier: str) -> ThrottleDecision:
        with self._lock:
            now = self._clock()
            self._prune(now)

            window = self._windows.get(identifier)
            if window is None:
                self._make_room()
                window = ThrottleWindow(identifier=identifier, count=1, window_started_at=now)
                self._windows[identifier] = window
                return ThrottleDecision.admit(
                    identifier, window.count, self.limit, window.seconds_until_reset(now, self.interval)
                )

            retry_after = window.seconds_until_reset(now, self.interval)
            if window.count < self.limit:
                window.count += 1
                return ThrottleDecision.admit(identifier, window.count, self.limit, retry_after)

            logger.info(
                "throttle_rejected",
                throttle=self.name,
                count=window.count,
                limit=self.limit,
                retry_after=round(retry_after, 3),
            )
            return ThrottleDecision.reject(identifier, window.count, self.limit, retry_after)

    def reset(self, identifier: str) -> None:
        with self._lock:
            self._windows.pop(identifier, None)

    def window_for(self, identifier: str) -> Optional[ThrottleWindow]:
        """Copy of the live window of ``identifier``, if any."""
        with self._lock:
            self._prune(self._clock())
            window = self._windows.get(identifier)
            return window.copy() if window else None

    @property
    def tracked_identifiers(self) -> int:
        with self._lock:
            return len(self._windows)

    def _prune(self, now: float) -> None:
        while self._windows:
            oldest = next(iter(self._windows.values()))
            if not oldest.is_expired(now, self.interval):
                break
            self._windows.popitem(last=False)

    def _make_room(self) -> None:
        if self.max_tracked_identifiers is None:
            return
        while len(self._windows) >= self.max_tracked_identifiers:
            self._windows.popitem(last=False)
            logger.warning(
                "throttle_capacity_eviction",
                throttle=self.name,
                max_tracked_identifiers=self.max_tracked_identifiers,
            )
