"""Contact form orchestration.

Order of checks: throttle, field rules, reCAPTCHA, persistence, e-mails.
Cheap checks come first so a throttled or malformed request never costs a
provider round trip or a write. Throttle and store calls can block on the
network and run in the thread pool.
"""

from typing import Any, Mapping, Optional, Sequence

import structlog
from fastapi.concurrency import run_in_threadpool

from src.core.exceptions import (
    CaptchaVerificationError,
    RateLimitExceededError,
    StorageUnavailableError,
    SubmissionValidationError,
)
from src.core.metrics import MetricsCollector
from src.domain.entities.contact_submission import ContactLead
from src.domain.interfaces.repositories import IContactSink
from src.domain.interfaces.services import ILeadNotifier
from src.domain.rate_limiting import RequestThrottle
from src.domain.security.logging_service import secure_logging_service
from src.domain.validation import CONTACT_FORM_RULES, submission_validator
from src.domain.value_objects.receipts import ContactReceipt

from .captcha_policy import CaptchaPolicy

logger = structlog.get_logger(__name__)

FLOW = "contact"


class ContactSubmissionService:
    """Accepts contact form submissions.

    A lead is written to every configured sink. Sinks are independent: the
    request succeeds if at least one of them recorded the lead, and fails with
    ``StorageUnavailableError`` only when all of them failed. E-mail failures
    are logged and never fail the request.
    """

    def __init__(
        self,
        throttle: Optional[RequestThrottle],
        sinks: Sequence[IContactSink],
        captcha: CaptchaPolicy,
        notifier: Optional[ILeadNotifier],
        metrics: MetricsCollector,
    ):
        if not sinks:
            raise ValueError("at least one contact sink is required")
        self._throttle = throttle
        self._sinks = tuple(sinks)
        self._captcha = captcha
        self._notifier = notifier
        self._metrics = metrics

    async def submit(self, payload: Mapping[str, Any], client_ip: str) -> ContactReceipt:
        """Run one submission through the pipeline.

        Args:
            payload: Raw form fields keyed by their form names (``fullName``,
                ``email``, ...) plus an optional ``recaptchaToken``
            client_ip: Address the request came from, ``"unknown"`` if absent

        Raises:
            RateLimitExceededError: The client exhausted its window
            SubmissionValidationError: One or more fields failed their rule
            CaptchaVerificationError: The bot check refused the request
            StorageUnavailableError: No sink could record the lead
        """
        masked_ip = secure_logging_service.mask_ip_address(client_ip)

        if self._throttle is not None:
            decision = await run_in_threadpool(self._throttle.allow, f"{FLOW}:{client_ip}")
            if not decision.allowed:
                self._metrics.record_outcome(FLOW, "throttled")
                raise RateLimitExceededError(retry_after=decision.retry_after)

        result = submission_validator.validate(payload, CONTACT_FORM_RULES)
        if not result.valid:
            self._metrics.record_outcome(FLOW, "invalid")
            logger.info("contact_submission_invalid", client_ip=masked_ip, fields=sorted(result.field_errors))
            raise SubmissionValidationError(result.field_errors)

        try:
            await self._captcha.check(payload.get("recaptchaToken"), client_ip)
        except CaptchaVerificationError:
            self._metrics.record_outcome(FLOW, "captcha_failed")
            raise

        lead = ContactLead.from_cleaned(result.cleaned)
        stored_in = await run_in_threadpool(self._store, lead)

        notified = False
        if self._notifier is not None:
            notified = await self._notifier.send_contact_notifications(lead)
            if not notified:
                self._metrics.record_outcome(FLOW, "email_failed")

        self._metrics.record_outcome(FLOW, "accepted")
        logger.info(
            "contact_submission_accepted",
            client_ip=masked_ip,
            email=secure_logging_service.mask_email(lead.email),
            project_type=lead.project_type,
            stored_in=list(stored_in),
            notified=notified,
        )
        return ContactReceipt(stored_in=stored_in, notified=notified)

    def _store(self, lead: ContactLead) -> tuple:
        stored_in = []
        for sink in self._sinks:
            try:
                sink.add(lead)
            except StorageUnavailableError as exc:
                logger.error("contact_sink_failed", sink=sink.name, code=exc.code, error=str(exc))
                continue
            stored_in.append(sink.name)

        if not stored_in:
            self._metrics.record_outcome(FLOW, "storage_unavailable")
            raise StorageUnavailableError("No contact store accepted the submission.")
        return tuple(stored_in)
