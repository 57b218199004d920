"""Stores that append leads to a Google spreadsheet.

Sheet layout (one header row, then one row per lead):

- Contact Submissions: Timestamp, Full Name, Email, Project Type, Priority,
  Project Details
- Newsletter Subscriptions: Timestamp, Email, Source

A spreadsheet has no uniqueness constraint. The subscription store looks the
address up before appending and holds a process-local lock over both steps,
so duplicates are only possible between separate processes.
"""

import threading
from typing import Sequence

from structlog import get_logger

from src.domain.entities.contact_submission import ContactLead
from src.domain.interfaces.repositories import IContactSink
from src.domain.subscriptions import SubscriptionRecord, SubscriptionStore, normalize_identity
from src.infrastructure.services.spreadsheet import GoogleSheetsClient

logger = get_logger(__name__)

CONTACT_HEADERS = ("Timestamp", "Full Name", "Email", "Project Type", "Priority", "Project Details")
NEWSLETTER_HEADERS = ("Timestamp", "Email", "Source")


class SpreadsheetContactSink(IContactSink):
    name = "spreadsheet"

    def __init__(self, client: GoogleSheetsClient, sheet_title: str = "Contact Submissions"):
        self._client = client
        self._sheet_title = sheet_title

    def add(self, lead: ContactLead) -> None:
        self._client.ensure_sheet(self._sheet_title, CONTACT_HEADERS)
        self._client.append_row(
            self._sheet_title,
            [
                lead.submitted_at.isoformat(),
                lead.full_name,
                lead.email,
                lead.project_type,
                lead.priority,
                lead.project_scope,
            ],
        )
        logger.debug("contact_stored", store=self.name)


class SpreadsheetSubscriptionStore(SubscriptionStore):
    EMAIL_COLUMN = "B"

    def __init__(self, client: GoogleSheetsClient, sheet_title: str = "Newsletter Subscriptions"):
        self._client = client
        self._sheet_title = sheet_title
        self._lock = threading.Lock()

    def _stored_identities(self) -> Sequence[str]:
        self._client.ensure_sheet(self._sheet_title, NEWSLETTER_HEADERS)
        values = self._client.read_column(self._sheet_title, self.EMAIL_COLUMN)
        # First row is the header.
        return [normalize_identity(value) for value in values[1:] if value]

    def exists(self, identity: str) -> bool:
        return identity in self._stored_identities()

    def insert(self, record: SubscriptionRecord) -> None:
        self._client.ensure_sheet(self._sheet_title, NEWSLETTER_HEADERS)
        self._client.append_row(
            self._sheet_title,
            [record.recorded_at.isoformat(), record.identity, record.source],
        )

    def insert_if_absent(self, record: SubscriptionRecord) -> bool:
        with self._lock:
            if self.exists(record.identity):
                return False
            self.insert(record)
            return True
