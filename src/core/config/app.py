"""
Application-specific settings.
"""
from typing import List, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, debug mode, and CORS origins.

    Security Note:
        - Ensure ALLOWED_ORIGINS is explicitly set to the marketing site's domains
          in production so only the site's forms can post to the API.
        - TRUST_PROXY_HEADERS must only be enabled behind a reverse proxy that
          overwrites X-Forwarded-For, otherwise clients can pick their own
          rate-limit identifier.
        - ADMIN_API_KEY protects the read-only operational endpoints; leaving it
          empty disables them.
    """
    PROJECT_NAME: str = "leadgate"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = Field(ge=1, default=1)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(default="http://localhost:3000", validate_default=True)
    TRUST_PROXY_HEADERS: bool = False
    ADMIN_API_KEY: SecretStr = SecretStr("")

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of origins into a list.

        Args:
            v: Input value as a string or list of origins.

        Returns:
            List of stripped origin strings.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v
