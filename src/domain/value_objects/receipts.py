"""What the lead-capture services hand back to the API layer."""

from dataclasses import dataclass

from src.domain.subscriptions import RegistrationStatus


@dataclass(frozen=True, slots=True)
class ContactReceipt:
    """An accepted contact submission.

    Attributes:
        stored_in: Names of the sinks that recorded the lead.
        notified: Whether the notification e-mails went out.
    """

    stored_in: tuple
    notified: bool


@dataclass(frozen=True, slots=True)
class SubscriptionReceipt:
    """An accepted newsletter request.

    ``status`` keeps the created/already-subscribed distinction for logs and
    metrics; the HTTP response is the same for both.
    """

    status: RegistrationStatus
    welcomed: bool

    @property
    def created(self) -> bool:
        return self.status is RegistrationStatus.CREATED
