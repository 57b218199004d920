"""Newsletter sign-up orchestration."""

from typing import Any, Mapping, Optional

import structlog
from fastapi.concurrency import run_in_threadpool

from src.core.exceptions import (
    CaptchaVerificationError,
    RateLimitExceededError,
    StorageUnavailableError,
    SubmissionValidationError,
)
from src.core.metrics import MetricsCollector
from src.domain.interfaces.services import ILeadNotifier
from src.domain.rate_limiting import RequestThrottle
from src.domain.security.logging_service import secure_logging_service
from src.domain.subscriptions import SubscriptionGuard
from src.domain.validation import NEWSLETTER_FORM_RULES, submission_validator
from src.domain.value_objects.receipts import SubscriptionReceipt

from .captcha_policy import CaptchaPolicy

logger = structlog.get_logger(__name__)

FLOW = "newsletter"


class NewsletterSubscriptionService:
    """Registers newsletter sign-ups through the duplicate-subscription guard.

    A repeated sign-up is a success for the caller: the receipt carries
    ``ALREADY_EXISTS``, no welcome e-mail is sent, and the API answers exactly
    as it does for a new subscriber so the endpoint cannot be used to probe
    which addresses are on the list.
    """

    def __init__(
        self,
        throttle: Optional[RequestThrottle],
        guard: SubscriptionGuard,
        captcha: CaptchaPolicy,
        notifier: Optional[ILeadNotifier],
        metrics: MetricsCollector,
        source: str = "Website Newsletter Form",
    ):
        self._throttle = throttle
        self._guard = guard
        self._captcha = captcha
        self._notifier = notifier
        self._metrics = metrics
        self._source = source

    async def subscribe(self, payload: Mapping[str, Any], client_ip: str) -> SubscriptionReceipt:
        """
        Raises:
            RateLimitExceededError: The client exhausted its window
            SubmissionValidationError: The e-mail failed its rule
            CaptchaVerificationError: The bot check refused the request
            StorageUnavailableError: The subscription store could not be reached
        """
        masked_ip = secure_logging_service.mask_ip_address(client_ip)

        if self._throttle is not None:
            decision = await run_in_threadpool(self._throttle.allow, f"{FLOW}:{client_ip}")
            if not decision.allowed:
                self._metrics.record_outcome(FLOW, "throttled")
                raise RateLimitExceededError(retry_after=decision.retry_after)

        result = submission_validator.validate(payload, NEWSLETTER_FORM_RULES)
        if not result.valid:
            self._metrics.record_outcome(FLOW, "invalid")
            logger.info("newsletter_subscription_invalid", client_ip=masked_ip)
            raise SubmissionValidationError(result.field_errors)

        try:
            await self._captcha.check(payload.get("recaptchaToken"), client_ip)
        except CaptchaVerificationError:
            self._metrics.record_outcome(FLOW, "captcha_failed")
            raise

        try:
            registration = await run_in_threadpool(self._guard.register_if_new, result.get("email"), self._source)
        except StorageUnavailableError:
            self._metrics.record_outcome(FLOW, "storage_unavailable")
            raise

        welcomed = False
        if registration.created:
            self._metrics.record_outcome(FLOW, "created")
            if self._notifier is not None:
                welcomed = await self._notifier.send_newsletter_welcome(registration.identity)
                if not welcomed:
                    self._metrics.record_outcome(FLOW, "email_failed")
        else:
            self._metrics.record_outcome(FLOW, "already_subscribed")

        self._metrics.record_outcome(FLOW, "accepted")
        logger.info(
            "newsletter_subscription_accepted",
            client_ip=masked_ip,
            status=registration.status.value,
            welcomed=welcomed,
        )
        return SubscriptionReceipt(status=registration.status, welcomed=welcomed)
