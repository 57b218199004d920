"""
Subscription Domain Services

- SubscriptionGuard: turns a repeated one-time action into an idempotent
  "already done" outcome instead of a duplicate side effect.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import structlog

from src.core.exceptions import StorageUnavailableError
from src.domain.security.logging_service import secure_logging_service

from .entities import SubscriptionRecord, normalize_identity
from .repositories import SubscriptionStore
from .value_objects import RegistrationResult

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubscriptionGuard:
    """Registers an identity once and reports repeats as ``ALREADY_EXISTS``.

    The existence check and the insert are delegated to the store's
    ``insert_if_absent``. Whether two racing registrations for one identity
    can both succeed therefore depends on the store: the relational store has
    a unique index, the in-memory store serialises under a lock, the
    spreadsheet store cannot prevent the race.

    The guard never retries; a ``StorageUnavailableError`` reaches the caller
    untouched so it can decide to fail open or closed.
    """

    def __init__(self, store: SubscriptionStore, clock: Callable[[], datetime] = utc_now):
        self._store = store
        self._clock = clock

    def register_if_new(self, identity: str, source: str) -> RegistrationResult:
        normalized = normalize_identity(identity)
        if not normalized:
            raise ValueError("identity must not be blank")

        record = SubscriptionRecord(identity=normalized, recorded_at=self._clock(), source=source)
        try:
            created = self._store.insert_if_absent(record)
        except StorageUnavailableError as exc:
            logger.error(
                "subscription_store_unavailable",
                identity=secure_logging_service.mask_email(normalized),
                store=type(self._store).__name__,
                error=str(exc),
            )
            raise

        if created:
            logger.info(
                "subscription_registered",
                identity=secure_logging_service.mask_email(normalized),
                source=source,
            )
            return RegistrationResult.new(record)

        logger.info(
            "subscription_already_exists",
            identity=secure_logging_service.mask_email(normalized),
            source=source,
        )
        return RegistrationResult.existing(normalized)
