from .redis_throttle import RedisFixedWindowThrottle

__all__ = ["RedisFixedWindowThrottle"]
