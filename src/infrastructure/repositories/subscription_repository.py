"""Relational subscription store backed by the ``newsletter_subscriptions`` table."""

from typing import Callable, ContextManager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select
from structlog import get_logger

from src.core.exceptions import StorageUnavailableError
from src.domain.entities.newsletter_subscription import NewsletterSubscription
from src.domain.subscriptions import SubscriptionRecord, SubscriptionStore
from src.infrastructure.database import get_db_session

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


class SqlSubscriptionStore(SubscriptionStore):
    """Subscription store whose uniqueness is enforced by a unique index.

    ``insert_if_absent`` does not check first: it inserts and treats the
    unique-violation as "already exists", so two workers racing on one
    address end with exactly one row and one ``CREATED`` outcome.
    """

    def __init__(self, session_factory: SessionFactory = get_db_session):
        self._session_factory = session_factory

    def exists(self, identity: str) -> bool:
        try:
            with self._session_factory() as session:
                statement = select(NewsletterSubscription.id).where(NewsletterSubscription.email == identity)
                return session.exec(statement).first() is not None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Subscription lookup failed: {exc.__class__.__name__}") from exc

    def insert(self, record: SubscriptionRecord) -> None:
        if not self.insert_if_absent(record):
            logger.debug("subscription_insert_skipped_duplicate")

    def insert_if_absent(self, record: SubscriptionRecord) -> bool:
        try:
            with self._session_factory() as session:
                session.add(NewsletterSubscription.from_record(record))
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    return False
                return True
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Subscription insert failed: {exc.__class__.__name__}") from exc
