"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, database, redis, throttling, storage, captcha, email) into a single,
accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, email test mode on, missing credentials only warn
- Test: Uses .env.test, email test mode on, in-memory stores are typical
- Staging: Uses .env.staging, required credentials enforced
- Production: Uses .env.production, required credentials enforced
"""

import logging
import os
from pathlib import Path
from typing import List

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .captcha import CaptchaSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .redis import RedisSettings, ThrottleSettings
from .storage import SpreadsheetSettings, StorageSettings

logger = logging.getLogger(__name__)

STRICT_ENVIRONMENTS = ("staging", "production")


class Settings(
    AppSettings,
    DatabaseSettings,
    RedisSettings,
    ThrottleSettings,
    StorageSettings,
    SpreadsheetSettings,
    CaptchaSettings,
    EmailSettings,
):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - Secrets (database and Redis passwords, SMTP password, reCAPTCHA secret,
          Google private key) are SecretStr and never logged.
    Usage:
        - Access settings via the singleton instance `settings` throughout the application.
        - Components that can be tested in isolation take the values they need as
          constructor arguments instead of reading the singleton.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True

        if env == "development":
            self.DEBUG = True

        logger.info(
            "Application running in %s environment (email test mode: %s, debug: %s)",
            env,
            self.EMAIL_TEST_MODE,
            self.DEBUG,
        )

    def required_fields(self) -> List[str]:
        """Names of the settings the configured backends cannot work without."""
        required = ["PROJECT_NAME"]
        if self.uses_store("database"):
            required += ["POSTGRES_HOST", "POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD"]
        if self.uses_store("spreadsheet"):
            required += ["GOOGLE_SHEET_ID", "GOOGLE_SERVICE_ACCOUNT_EMAIL", "GOOGLE_PRIVATE_KEY"]
        if self.RATE_LIMIT_BACKEND == "redis":
            required += ["REDIS_HOST"]
        if self.RECAPTCHA_ENABLED:
            required += ["RECAPTCHA_SECRET_KEY"]
        return required

    def validate_required_fields(self) -> None:
        """Validates that all required environment variables are set.

        Raises ValueError if any critical field is missing or empty in staging or
        production. Development and test environments only log a warning.

        Raises:
            ValueError: If required fields are missing in a strict environment.
        """
        missing_fields = []
        for field in self.required_fields():
            value = getattr(self, field, None)
            if hasattr(value, "get_secret_value"):
                value = value.get_secret_value()
            if not value:
                missing_fields.append(field)

        if missing_fields:
            error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
            if self.APP_ENV in STRICT_ENVIRONMENTS:
                logger.error(error_msg)
                raise ValueError(error_msg)
            logger.warning(error_msg)
        else:
            logger.info("All required environment variables are set.")

        try:
            self.validate_smtp_config()
        except ValueError as e:
            if self.APP_ENV in STRICT_ENVIRONMENTS:
                logger.error(f"Email configuration error: {e}")
                raise
            logger.warning(f"Email config warning - {e}")


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info(f"Loading environment configuration from {env_file}")
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info(f"Loading environment configuration from .env (environment: {env})")
    else:
        logger.warning(f"No .env file found, using environment variables only (environment: {env})")
    return Settings()


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
