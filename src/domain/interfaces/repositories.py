"""Repository interfaces for abstracting data persistence in the domain layer.

These abstract base classes act as "ports": the lead-capture services talk to
them, and the concrete adapters in ``src.infrastructure.repositories`` map the
calls to a relational database, a Google spreadsheet or process memory.

The subscription store port lives with its guard in ``src.domain.subscriptions``.

All methods are synchronous; the API layer runs them in the thread pool.
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.entities.contact_submission import ContactLead, ContactSubmission


class IContactSink(ABC):
    """A destination that records contact submissions.

    Several sinks may be configured at once (e.g. database and spreadsheet);
    each receives every accepted lead.
    """

    name: str = "sink"

    @abstractmethod
    def add(self, lead: ContactLead) -> None:
        """Persists one lead.

        Raises:
            StorageUnavailableError: If the destination cannot be written.
        """
        raise NotImplementedError


class IContactRepository(IContactSink):
    """A contact sink that can also be queried by the operations team."""

    @abstractmethod
    def list_recent(self, limit: int = 50) -> List[ContactSubmission]:
        """Returns submissions newest first.

        Args:
            limit: Maximum number of rows to return.
        """
        raise NotImplementedError
