"""Fixed-window throttle shared across processes through Redis.

The check-and-increment runs as one Lua script so concurrent workers cannot
both take the last slot of a window. When Redis is unreachable the throttle
falls back to a per-process ``FixedWindowThrottle`` with the same limits, so
an outage degrades the limit's accuracy but never blocks or fails a request.
"""

from typing import Optional

import structlog
from redis import Redis
from redis.exceptions import RedisError

from src.domain.rate_limiting import FixedWindowThrottle, RequestThrottle, ThrottleDecision

logger = structlog.get_logger(__name__)

# KEYS[1] window key, ARGV[1] limit, ARGV[2] interval in milliseconds.
# Returns {allowed, count, pttl}. A rejection leaves the window untouched.
FIXED_WINDOW_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return {0, current, redis.call('PTTL', KEYS[1])}
end
current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('PEXPIRE', KEYS[1], ARGV[2])
end
return {1, current, redis.call('PTTL', KEYS[1])}
"""


class RedisFixedWindowThrottle(RequestThrottle):
    """Fixed-window throttle whose windows are Redis keys with a TTL.

    Expired windows are removed by Redis itself, so no identifier ceiling is
    needed on this backend.
    """

    def __init__(
        self,
        client: Redis,
        limit: int,
        interval: float,
        name: str = "default",
        key_prefix: str = "leadgate:throttle",
        fallback: Optional[FixedWindowThrottle] = None,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.limit = limit
        self.interval = interval
        self.name = name
        self._client = client
        self._key_prefix = key_prefix
        self._script = client.register_script(FIXED_WINDOW_SCRIPT)
        self._fallback = fallback or FixedWindowThrottle(limit, interval, name=name)

    def _key(self, identifier: str) -> str:
        return f"{self._key_prefix}:{self.name}:{identifier}"

    def allow(self, identifier: str) -> ThrottleDecision:
        try:
            allowed, count, pttl = self._script(
                keys=[self._key(identifier)],
                args=[self.limit, int(self.interval * 1000)],
            )
        except RedisError as exc:
            logger.error("redis_throttle_failed", throttle=self.name, error=str(exc))
            return self._fallback.allow(identifier)

        # PTTL is negative when the key vanished between calls; treat it as reset.
        retry_after = max(0.0, int(pttl) / 1000.0)
        if int(allowed):
            return ThrottleDecision.admit(identifier, int(count), self.limit, retry_after)

        logger.info(
            "throttle_rejected",
            throttle=self.name,
            backend="redis",
            count=int(count),
            limit=self.limit,
            retry_after=round(retry_after, 3),
        )
        return ThrottleDecision.reject(identifier, int(count), self.limit, retry_after)

    def reset(self, identifier: str) -> None:
        self._fallback.reset(identifier)
        try:
            self._client.delete(self._key(identifier))
        except RedisError as exc:
            logger.error("redis_throttle_reset_failed", throttle=self.name, error=str(exc))
