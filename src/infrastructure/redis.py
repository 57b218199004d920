"""
Redis Connection Module

Provides the Redis client used by the shared (cross-process) throttle backend.
The throttle runs inside request handlers without awaiting, so the client is
the synchronous one.

**Security Note**: Use rediss:// or REDIS_SSL when Redis is not on a trusted
network, and never log the connection URL.
"""

import structlog
from redis import Redis

from src.core.config.settings import settings

logger = structlog.get_logger(__name__)


def create_redis_client(url: str | None = None) -> Redis:
    """Create a Redis client from the configured URL.

    The connection is opened lazily by redis-py on the first command.
    """
    client = Redis.from_url(
        url or settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=2.0,
        socket_connect_timeout=2.0,
    )
    logger.debug("redis_client_created")
    return client


def check_redis_health(client: Redis) -> bool:
    try:
        return bool(client.ping())
    except Exception as exc:
        logger.error("redis_health_check_failed", error=str(exc))
        return False
