"""Repository implementations for the infrastructure layer."""

from .contact_repository import SqlContactRepository
from .memory import InMemoryContactRepository, InMemorySubscriptionStore
from .spreadsheet_repositories import SpreadsheetContactSink, SpreadsheetSubscriptionStore
from .subscription_repository import SqlSubscriptionStore

__all__ = [
    "InMemoryContactRepository",
    "InMemorySubscriptionStore",
    "SpreadsheetContactSink",
    "SpreadsheetSubscriptionStore",
    "SqlContactRepository",
    "SqlSubscriptionStore",
]
