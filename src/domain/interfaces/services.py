"""Service interfaces for the external collaborators of the lead flows.

- ICaptchaVerifier: bot-mitigation token verification
- ILeadNotifier: confirmation and notification e-mails
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.contact_submission import ContactLead
from src.domain.value_objects.captcha import CaptchaOutcome


class ICaptchaVerifier(ABC):
    """Verifies a bot-mitigation token with its provider."""

    @abstractmethod
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaOutcome:
        """Returns PASSED, REJECTED or UNAVAILABLE; never raises for provider errors."""
        raise NotImplementedError


class ILeadNotifier(ABC):
    """Sends the e-mails that follow an accepted lead.

    Both methods report delivery with a boolean; a failed e-mail never undoes
    a stored submission.
    """

    @abstractmethod
    async def send_contact_notifications(self, lead: ContactLead) -> bool:
        """Notifies the team about ``lead`` and acknowledges it to the submitter."""
        raise NotImplementedError

    @abstractmethod
    async def send_newsletter_welcome(self, email: str) -> bool:
        """Welcomes a new newsletter subscriber."""
        raise NotImplementedError
