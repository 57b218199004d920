"""Composition root of the lead-capture flows.

``build_context`` turns the settings into wired services: which throttle
backend, which stores, whether reCAPTCHA and e-mail are active. The result
lives on ``app.state.lead_capture`` for the lifetime of the application.
Tests build a context from their own settings (usually in-memory stores) and
hand it to ``create_application``.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from structlog import get_logger

from src.core.metrics import MetricsCollector
from src.domain.interfaces.repositories import IContactRepository, IContactSink
from src.domain.interfaces.services import ILeadNotifier
from src.domain.rate_limiting import FixedWindowThrottle, RequestThrottle
from src.domain.services.lead_capture import (
    CaptchaPolicy,
    ContactSubmissionService,
    NewsletterSubscriptionService,
)
from src.domain.subscriptions import SubscriptionGuard, SubscriptionStore

logger = get_logger(__name__)


@dataclass
class LeadCaptureContext:
    """Everything a request handler needs, built once per application.

    Attributes:
        contact_service: Orchestrates contact submissions.
        newsletter_service: Orchestrates newsletter sign-ups.
        metrics: Outcome and request counters.
        contact_repository: Queryable contact store, if one is configured.
        health_checks: Named connectivity probes for the configured backends.
        uses_database: Whether the relational tables must exist at startup.
    """

    contact_service: ContactSubmissionService
    newsletter_service: NewsletterSubscriptionService
    metrics: MetricsCollector
    contact_repository: Optional[IContactRepository] = None
    health_checks: Dict[str, Callable[[], bool]] = field(default_factory=dict)
    uses_database: bool = False
    _closers: List[Callable[[], Any]] = field(default_factory=list)

    def close(self) -> None:
        for closer in self._closers:
            try:
                closer()
            except Exception as exc:
                logger.warning("context_close_failed", error=str(exc))


def _build_throttle(config, name: str, limit: int, interval: float, redis_client) -> RequestThrottle:
    memory = FixedWindowThrottle(
        limit,
        interval,
        max_tracked_identifiers=config.RATE_LIMIT_MAX_TRACKED_IDENTIFIERS,
        name=name,
    )
    if redis_client is None:
        return memory

    from src.infrastructure.rate_limiting import RedisFixedWindowThrottle

    return RedisFixedWindowThrottle(redis_client, limit, interval, name=name, fallback=memory)


def _build_subscription_store(name: str, config, sheets_client) -> SubscriptionStore:
    if name == "database":
        from src.infrastructure.repositories import SqlSubscriptionStore

        return SqlSubscriptionStore()
    if name == "spreadsheet":
        from src.infrastructure.repositories import SpreadsheetSubscriptionStore

        return SpreadsheetSubscriptionStore(sheets_client, config.NEWSLETTER_SHEET_TITLE)

    from src.infrastructure.repositories import InMemorySubscriptionStore

    return InMemorySubscriptionStore()


def _build_contact_sink(name: str, config, sheets_client) -> IContactSink:
    if name == "database":
        from src.infrastructure.repositories import SqlContactRepository

        return SqlContactRepository()
    if name == "spreadsheet":
        from src.infrastructure.repositories import SpreadsheetContactSink

        return SpreadsheetContactSink(sheets_client, config.CONTACT_SHEET_TITLE)

    from src.infrastructure.repositories import InMemoryContactRepository

    return InMemoryContactRepository()


def build_context(
    config,
    notifier: Optional[ILeadNotifier] = None,
    captcha: Optional[CaptchaPolicy] = None,
) -> LeadCaptureContext:
    """Wire the services described by ``config``.

    Args:
        config: A ``Settings`` instance.
        notifier: Overrides the e-mail service (tests pass a fake).
        captcha: Overrides the reCAPTCHA policy.
    """
    metrics = MetricsCollector()
    health_checks: Dict[str, Callable[[], bool]] = {}
    closers: List[Callable[[], Any]] = []

    redis_client = None
    if config.RATE_LIMIT_ENABLED and config.RATE_LIMIT_BACKEND == "redis":
        from src.infrastructure.redis import check_redis_health, create_redis_client

        redis_client = create_redis_client(config.REDIS_URL)
        health_checks["redis"] = partial(check_redis_health, redis_client)
        closers.append(redis_client.close)

    contact_throttle = newsletter_throttle = None
    if config.RATE_LIMIT_ENABLED:
        contact_throttle = _build_throttle(
            config, "contact", config.CONTACT_RATE_LIMIT, config.CONTACT_RATE_WINDOW_SECONDS, redis_client
        )
        newsletter_throttle = _build_throttle(
            config, "newsletter", config.NEWSLETTER_RATE_LIMIT, config.NEWSLETTER_RATE_WINDOW_SECONDS, redis_client
        )

    sheets_client = None
    if config.uses_store("spreadsheet"):
        from src.infrastructure.services.spreadsheet import build_sheets_client

        sheets_client = build_sheets_client(config)
        closers.append(sheets_client.close)

    uses_database = config.uses_store("database")
    if uses_database:
        from src.infrastructure.database import check_database_health

        health_checks["database"] = check_database_health

    guard = SubscriptionGuard(_build_subscription_store(config.SUBSCRIPTION_STORE, config, sheets_client))
    sinks = [_build_contact_sink(name, config, sheets_client) for name in config.contact_store_names]
    contact_repository = next((sink for sink in sinks if isinstance(sink, IContactRepository)), None)

    if captcha is None:
        verifier = None
        if config.RECAPTCHA_ENABLED and config.RECAPTCHA_SECRET_KEY.get_secret_value():
            from src.infrastructure.services.captcha import RecaptchaVerifier

            verifier = RecaptchaVerifier(
                secret_key=config.RECAPTCHA_SECRET_KEY.get_secret_value(),
                min_score=config.RECAPTCHA_MIN_SCORE,
                verify_url=config.RECAPTCHA_VERIFY_URL,
                timeout=config.RECAPTCHA_TIMEOUT_SECONDS,
            )
        elif config.RECAPTCHA_ENABLED:
            logger.warning("recaptcha_enabled_without_secret")
        captcha = CaptchaPolicy(
            verifier,
            enabled=config.RECAPTCHA_ENABLED,
            required=config.RECAPTCHA_REQUIRED,
            fail_open=config.RECAPTCHA_FAIL_OPEN,
        )

    if notifier is None:
        from src.infrastructure.services.email import LeadEmailService

        notifier = LeadEmailService(config)

    logger.info(
        "lead_capture_context_built",
        subscription_store=config.SUBSCRIPTION_STORE,
        contact_stores=config.contact_store_names,
        rate_limit_backend=config.RATE_LIMIT_BACKEND if config.RATE_LIMIT_ENABLED else "disabled",
        recaptcha=captcha.enabled,
    )

    return LeadCaptureContext(
        contact_service=ContactSubmissionService(contact_throttle, sinks, captcha, notifier, metrics),
        newsletter_service=NewsletterSubscriptionService(
            newsletter_throttle, guard, captcha, notifier, metrics, source=config.NEWSLETTER_SOURCE
        ),
        metrics=metrics,
        contact_repository=contact_repository,
        health_checks=health_checks,
        uses_database=uses_database,
        _closers=closers,
    )
