"""
Rate limiting for the public submission endpoints.

The throttle is a fixed-window counter keyed by a client identifier such as
``contact:<ip>``. See ``services`` for the algorithm.
"""

from .entities import ThrottleWindow
from .services import Clock, FixedWindowThrottle, RequestThrottle
from .value_objects import ThrottleDecision

__all__ = [
    "Clock",
    "FixedWindowThrottle",
    "RequestThrottle",
    "ThrottleDecision",
    "ThrottleWindow",
]
