"""
Redis settings and rate limiting settings.
"""
import logging

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class RedisSettings(BaseSettings):
    """
    Defines settings for the Redis connection used by the shared throttle backend.

    Security Note:
        - REDIS_PASSWORD must be set in production to prevent unauthorized access.
        - Use rediss:// (REDIS_SSL) when Redis is reached over an untrusted network.
    """
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = Field(ge=1, le=65535, default=6379)
    REDIS_PASSWORD: SecretStr = SecretStr("")
    REDIS_SSL: bool = False
    REDIS_URL: str = Field(default="", validate_default=True)

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def assemble_redis_url(cls, v: str | None, info: ValidationInfo) -> str:
        """
        Assembles the Redis connection URL if not provided explicitly.

        Args:
            v: Explicitly provided URL or None.
            info: Validation context with other field values.

        Returns:
            Assembled or provided Redis URL.
        """
        if v:
            return v

        values = info.data
        protocol = "rediss" if values.get("REDIS_SSL") else "redis"
        redis_password = values.get("REDIS_PASSWORD")
        secret = redis_password.get_secret_value() if redis_password else ""
        password = f":{secret}@" if secret else ""

        url = f"{protocol}://{password}{values.get('REDIS_HOST')}:{values.get('REDIS_PORT')}/0"
        logger.debug("Assembled REDIS_URL (password masked for security).")
        return url


class ThrottleSettings(BaseSettings):
    """
    Fixed-window limits for the public submission endpoints.

    Each endpoint gets its own throttle so a burst of contact requests never
    eats into the newsletter budget of the same client.

    Performance Note:
        - RATE_LIMIT_MAX_TRACKED_IDENTIFIERS bounds the memory of the in-memory
          backend; the oldest window is evicted when the ceiling is reached.
    """
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_BACKEND: str = Field(default="memory", pattern="^(memory|redis)$")
    RATE_LIMIT_MAX_TRACKED_IDENTIFIERS: int = Field(default=500, ge=1)

    CONTACT_RATE_LIMIT: int = Field(default=3, ge=1)
    CONTACT_RATE_WINDOW_SECONDS: float = Field(default=60.0, gt=0)
    NEWSLETTER_RATE_LIMIT: int = Field(default=5, ge=1)
    NEWSLETTER_RATE_WINDOW_SECONDS: float = Field(default=60.0, gt=0)
