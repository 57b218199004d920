"""Relational contact repository backed by the ``contact_submissions`` table."""

from typing import Callable, ContextManager, List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from structlog import get_logger

from src.core.exceptions import StorageUnavailableError
from src.domain.entities.contact_submission import ContactLead, ContactSubmission
from src.domain.interfaces.repositories import IContactRepository
from src.infrastructure.database import get_db_session

logger = get_logger(__name__)


class SqlContactRepository(IContactRepository):
    name = "database"

    def __init__(self, session_factory: Callable[[], ContextManager[Session]] = get_db_session):
        self._session_factory = session_factory

    def add(self, lead: ContactLead) -> None:
        try:
            with self._session_factory() as session:
                row = ContactSubmission.from_lead(lead)
                session.add(row)
                session.commit()
                logger.debug("contact_stored", store=self.name, submission_id=row.id)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Contact insert failed: {exc.__class__.__name__}") from exc

    def list_recent(self, limit: int = 50) -> List[ContactSubmission]:
        try:
            with self._session_factory() as session:
                statement = (
                    select(ContactSubmission)
                    .order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
                    .limit(limit)
                )
                return list(session.exec(statement).all())
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Contact listing failed: {exc.__class__.__name__}") from exc
