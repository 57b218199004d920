"""Google reCAPTCHA v3 token verification."""

from typing import Optional

import httpx
from structlog import get_logger

from src.domain.interfaces.services import ICaptchaVerifier
from src.domain.value_objects.captcha import CaptchaOutcome, CaptchaVerdict

logger = get_logger(__name__)


class RecaptchaVerifier(ICaptchaVerifier):
    """Checks a token against the ``siteverify`` endpoint.

    A token passes when Google reports success and, for v3 tokens, the score
    reaches ``min_score``. Network errors and unparsable answers come back
    as UNAVAILABLE so the caller's fail-open policy applies.
    """

    def __init__(
        self,
        secret_key: str,
        min_score: float = 0.5,
        verify_url: str = "https://www.google.com/recaptcha/api/siteverify",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._secret_key = secret_key
        self._min_score = min_score
        self._verify_url = verify_url
        self._timeout = timeout
        self._transport = transport

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaOutcome:
        data = {"secret": self._secret_key, "response": token}
        if remote_ip and remote_ip != "unknown":
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._verify_url, data=data)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("recaptcha_unavailable", error=str(exc))
            return CaptchaOutcome.unavailable()

        score = payload.get("score")
        error_codes = tuple(payload.get("error-codes", ()))
        if not payload.get("success"):
            logger.info("recaptcha_rejected", error_codes=list(error_codes))
            return CaptchaOutcome(CaptchaVerdict.REJECTED, score, error_codes)

        try:
            score = float(score) if score is not None else None
        except (TypeError, ValueError):
            logger.warning("recaptcha_unparsable_score", score=repr(score))
            return CaptchaOutcome.unavailable()

        if score is not None and score < self._min_score:
            logger.info("recaptcha_low_score", score=score, min_score=self._min_score)
            return CaptchaOutcome(CaptchaVerdict.REJECTED, score, error_codes)

        return CaptchaOutcome(CaptchaVerdict.PASSED, score, error_codes)
