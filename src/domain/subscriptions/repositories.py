"""
Subscription Domain Repositories

Repository interface the guard depends on. Implementations live in the
infrastructure layer (relational database, Google Sheets, in-memory).
"""

from abc import ABC, abstractmethod

from .entities import SubscriptionRecord


class SubscriptionStore(ABC):
    """
    Persistent key-existence / insert primitive for subscription records.

    Implementations raise ``StorageUnavailableError`` when the backing store
    cannot be reached; they never report an outage as "exists" or "absent".
    """

    @abstractmethod
    def exists(self, identity: str) -> bool:
        """Return True if a record for the normalised ``identity`` exists."""

    @abstractmethod
    def insert(self, record: SubscriptionRecord) -> None:
        """Persist ``record`` unconditionally."""

    def insert_if_absent(self, record: SubscriptionRecord) -> bool:
        """Insert ``record`` unless its identity is already stored.

        Returns True if the record was written. This default is a plain
        check-then-insert and is only as atomic as the caller's serialisation;
        stores that can enforce uniqueness override it.
        """
        if self.exists(record.identity):
            return False
        self.insert(record)
        return True
