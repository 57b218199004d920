"""Email configuration settings for leadgate.

This module defines the SMTP connection and the sender/recipient addresses used
for contact notifications, contact acknowledgements and newsletter welcome
emails.
"""

from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults and validation.

    Security considerations:
    - SMTP credentials are handled as SecretStr to prevent logging
    - TLS is enforced by default
    - Templates are rendered with auto-escaping, submitter input never reaches
      the HTML unescaped

    Attributes:
        SMTP_HOST: SMTP server hostname
        SMTP_PORT: SMTP server port (587 for TLS, 465 for SSL)
        SMTP_USERNAME: SMTP authentication username
        SMTP_PASSWORD: SMTP authentication password (SecretStr)
        SMTP_USE_TLS: Enable STARTTLS (recommended)
        SMTP_USE_SSL: Enable implicit SSL (alternative to TLS)
        FROM_EMAIL: Sender email address
        FROM_NAME: Sender display name
        CONTACT_NOTIFICATION_EMAIL: Inbox that receives new contact submissions
        EMAIL_TEMPLATES_DIR: Directory containing email templates
        EMAIL_TEST_MODE: Log emails instead of sending them
    """

    SMTP_HOST: str = Field(
        default="localhost",
        description="SMTP server hostname"
    )
    SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port (587 for TLS, 465 for SSL)"
    )
    SMTP_USERNAME: Optional[str] = Field(
        default=None,
        description="SMTP authentication username"
    )
    SMTP_PASSWORD: Optional[SecretStr] = Field(
        default=None,
        description="SMTP authentication password"
    )
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Enable STARTTLS (recommended for production)"
    )
    SMTP_USE_SSL: bool = Field(
        default=False,
        description="Enable implicit SSL (alternative to TLS)"
    )

    FROM_EMAIL: EmailStr = Field(
        default="noreply@example.com",
        description="Default sender email address"
    )
    FROM_NAME: str = Field(
        default="Leadgate",
        description="Default sender name"
    )
    CONTACT_NOTIFICATION_EMAIL: Optional[EmailStr] = Field(
        default=None,
        description="Inbox for new contact submissions; falls back to SMTP_USERNAME"
    )
    COMPANY_NAME: str = Field(
        default="Leadgate",
        description="Company name used in email copy"
    )
    SITE_URL: str = Field(
        default="http://localhost:3000",
        description="Public site URL linked from emails"
    )

    EMAIL_TEMPLATES_DIR: str = Field(
        default="src/templates/email",
        description="Directory containing email templates"
    )
    EMAIL_TEST_MODE: bool = Field(
        default=False,
        description="Enable test mode (emails logged instead of sent)"
    )

    @property
    def notification_recipient(self) -> Optional[str]:
        return self.CONTACT_NOTIFICATION_EMAIL or self.SMTP_USERNAME

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {"production", "staging"}:
            return

        if not self.SMTP_USERNAME or not self.SMTP_PASSWORD:
            raise ValueError(
                "SMTP_USERNAME and SMTP_PASSWORD are required in production"
            )

        if not (self.SMTP_USE_TLS or self.SMTP_USE_SSL):
            raise ValueError(
                "Either SMTP_USE_TLS or SMTP_USE_SSL must be enabled for security"
            )

        if self.SMTP_USE_TLS and self.SMTP_USE_SSL:
            raise ValueError(
                "Cannot enable both SMTP_USE_TLS and SMTP_USE_SSL simultaneously"
            )
