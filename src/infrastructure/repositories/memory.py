"""In-process stores for development, tests and single-instance deployments.

Nothing survives a restart. The subscription store serialises
``insert_if_absent`` under a lock, which makes it the one store that is race
free within a process without help from a database.
"""

import threading
from typing import Dict, List

from structlog import get_logger

from src.domain.entities.contact_submission import ContactLead, ContactSubmission
from src.domain.interfaces.repositories import IContactRepository
from src.domain.subscriptions import SubscriptionRecord, SubscriptionStore

logger = get_logger(__name__)


class InMemorySubscriptionStore(SubscriptionStore):
    def __init__(self):
        self._records: Dict[str, SubscriptionRecord] = {}
        self._lock = threading.Lock()

    def exists(self, identity: str) -> bool:
        with self._lock:
            return identity in self._records

    def insert(self, record: SubscriptionRecord) -> None:
        with self._lock:
            self._records[record.identity] = record

    def insert_if_absent(self, record: SubscriptionRecord) -> bool:
        with self._lock:
            if record.identity in self._records:
                return False
            self._records[record.identity] = record
            return True

    def get(self, identity: str):
        with self._lock:
            return self._records.get(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class InMemoryContactRepository(IContactRepository):
    name = "memory"

    def __init__(self):
        self._rows: List[ContactSubmission] = []
        self._lock = threading.Lock()

    def add(self, lead: ContactLead) -> None:
        with self._lock:
            row = ContactSubmission.from_lead(lead)
            row.id = len(self._rows) + 1
            self._rows.append(row)
        logger.debug("contact_stored", store=self.name, submission_id=row.id)

    def list_recent(self, limit: int = 50) -> List[ContactSubmission]:
        with self._lock:
            rows = sorted(self._rows, key=lambda row: (row.created_at, row.id), reverse=True)
        return rows[:limit]
