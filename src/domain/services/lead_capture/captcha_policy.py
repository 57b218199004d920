"""When a bot-mitigation token is demanded, and what a provider outage means."""

from typing import Optional

import structlog

from src.core.exceptions import CaptchaVerificationError
from src.domain.interfaces.services import ICaptchaVerifier
from src.domain.value_objects.captcha import CaptchaVerdict

logger = structlog.get_logger(__name__)

# Sent by the site's forms when the reCAPTCHA script did not load.
PLACEHOLDER_TOKEN = "no-recaptcha"


class CaptchaPolicy:
    """Applies the configured reCAPTCHA policy to one request.

    - disabled, or no verifier configured: every request passes
    - token missing or the placeholder: rejected only when ``required``
    - provider unreachable: passes when ``fail_open``, rejected otherwise
    """

    def __init__(
        self,
        verifier: Optional[ICaptchaVerifier],
        enabled: bool = True,
        required: bool = False,
        fail_open: bool = True,
    ):
        self._verifier = verifier
        self._enabled = enabled and verifier is not None
        self._required = required
        self._fail_open = fail_open

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def check(self, token: Optional[str], remote_ip: Optional[str] = None) -> None:
        """Raises ``CaptchaVerificationError`` if the request must be refused."""
        if not self._enabled:
            return

        token = (token or "").strip()
        if not token or token == PLACEHOLDER_TOKEN:
            if self._required:
                raise CaptchaVerificationError("reCAPTCHA token is required")
            logger.info("captcha_token_missing_allowed")
            return

        outcome = await self._verifier.verify(token, remote_ip)
        if outcome.verdict is CaptchaVerdict.PASSED:
            return
        if outcome.verdict is CaptchaVerdict.UNAVAILABLE:
            if self._fail_open:
                logger.warning("captcha_unavailable_fail_open")
                return
            raise CaptchaVerificationError("reCAPTCHA verification is unavailable", code="captcha_unavailable")
        raise CaptchaVerificationError()
