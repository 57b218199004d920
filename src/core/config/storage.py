"""
Persistence settings: which stores receive leads, and how the spreadsheet
store authenticates.
"""
from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

STORE_CHOICES = ("database", "spreadsheet", "memory")


class StorageSettings(BaseSettings):
    """
    Selects the backing stores for the two lead flows.

    SUBSCRIPTION_STORE is a single store because it doubles as the uniqueness
    authority for newsletter sign-ups. CONTACT_STORES is a comma-separated list;
    every listed sink receives each contact submission.
    """
    SUBSCRIPTION_STORE: str = Field(default="database", pattern="^(database|spreadsheet|memory)$")
    CONTACT_STORES: str = "database"
    NEWSLETTER_SOURCE: str = "Website Newsletter Form"

    @field_validator("CONTACT_STORES")
    @classmethod
    def validate_contact_stores(cls, value: str) -> str:
        """Rejects unknown sink names early so a typo does not drop leads silently."""
        names = [name.strip() for name in value.split(",") if name.strip()]
        if not names:
            raise ValueError("CONTACT_STORES must name at least one store.")
        unknown = [name for name in names if name not in STORE_CHOICES]
        if unknown:
            raise ValueError(f"Unknown contact store(s): {', '.join(unknown)}")
        return ",".join(names)

    @property
    def contact_store_names(self) -> List[str]:
        return self.CONTACT_STORES.split(",")

    def uses_store(self, name: str) -> bool:
        """True if any flow is configured to write to the named store."""
        return self.SUBSCRIPTION_STORE == name or name in self.contact_store_names


class SpreadsheetSettings(BaseSettings):
    """
    Google Sheets service-account configuration.

    Security Note:
        - GOOGLE_PRIVATE_KEY is a PEM private key; it is commonly stored in a
          single-line environment variable with escaped newlines, which are
          restored here.
    """
    GOOGLE_SHEET_ID: str = ""
    GOOGLE_SERVICE_ACCOUNT_EMAIL: str = ""
    GOOGLE_PRIVATE_KEY: SecretStr = SecretStr("")
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    GOOGLE_SHEETS_API_BASE: str = "https://sheets.googleapis.com/v4/spreadsheets"
    GOOGLE_SHEETS_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    CONTACT_SHEET_TITLE: str = "Contact Submissions"
    NEWSLETTER_SHEET_TITLE: str = "Newsletter Subscriptions"

    @field_validator("GOOGLE_PRIVATE_KEY", mode="before")
    @classmethod
    def restore_key_newlines(cls, value):
        if isinstance(value, str) and "\\n" in value:
            return value.replace("\\n", "\n")
        return value

    @property
    def spreadsheet_configured(self) -> bool:
        return bool(
            self.GOOGLE_SHEET_ID
            and self.GOOGLE_SERVICE_ACCOUNT_EMAIL
            and self.GOOGLE_PRIVATE_KEY.get_secret_value()
        )
