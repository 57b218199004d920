from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from functools import partial

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from src.core.exceptions import StorageUnavailableError
from src.domain.entities import ContactLead, ContactStatus, ContactSubmission
from src.domain.subscriptions import SubscriptionRecord
from src.domain.validation import CONTACT_FORM_RULES, submission_validator
from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import (
    InMemoryContactRepository,
    InMemorySubscriptionStore,
    SqlContactRepository,
    SqlSubscriptionStore,
)

BASE_TIME = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return partial(get_db_session, engine)


@contextmanager
def unreachable_session():
    raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    yield  # pragma: no cover


def make_lead(minutes: int = 0, **overrides) -> ContactLead:
    values = dict(
        full_name="Jane Doe",
        email="jane@example.com",
        project_type="Web Application",
        priority="High",
        project_scope="A customer portal for our clients.",
        submitted_at=BASE_TIME + timedelta(minutes=minutes),
    )
    values.update(overrides)
    return ContactLead(**values)


def make_record(identity: str = "jane@example.com") -> SubscriptionRecord:
    return SubscriptionRecord(identity=identity, recorded_at=BASE_TIME, source="Website Newsletter Form")


@pytest.mark.unit
class TestSqlSubscriptionStore:
    def test_insert_if_absent_uses_unique_index(self, session_factory):
        store = SqlSubscriptionStore(session_factory)

        assert store.insert_if_absent(make_record())
        assert not store.insert_if_absent(make_record())
        assert store.exists("jane@example.com")
        assert not store.exists("someone@example.com")

    def test_insert_ignores_duplicates(self, session_factory):
        store = SqlSubscriptionStore(session_factory)
        store.insert(make_record())
        store.insert(make_record())

        assert store.exists("jane@example.com")

    def test_outage_raises_storage_unavailable(self):
        store = SqlSubscriptionStore(unreachable_session)

        with pytest.raises(StorageUnavailableError):
            store.exists("jane@example.com")
        with pytest.raises(StorageUnavailableError):
            store.insert_if_absent(make_record())


@pytest.mark.unit
class TestSqlContactRepository:
    def test_add_and_list_newest_first(self, session_factory):
        repository = SqlContactRepository(session_factory)
        repository.add(make_lead(0, full_name="First Lead"))
        repository.add(make_lead(5, full_name="Second Lead", implementation_timeframe="Q3"))

        rows = repository.list_recent()

        assert [row.full_name for row in rows] == ["Second Lead", "First Lead"]
        assert rows[0].status == ContactStatus.NEW.value
        assert rows[0].implementation_timeframe == "Q3"
        assert rows[1].implementation_timeframe is None

    def test_list_respects_limit(self, session_factory):
        repository = SqlContactRepository(session_factory)
        for minute in range(5):
            repository.add(make_lead(minute))

        assert len(repository.list_recent(limit=2)) == 2

    def test_escaped_fields_at_maximum_length_are_stored_intact(self, session_factory):
        form = {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "projectType": "/" * 100,
            "priority": "<" * 50,
            "projectScope": "See https://example.com/a/b/c " + "/" * 970,
            "implementationTimeframe": "\"" * 100,
            "projectScale": "'" * 100,
        }
        result = submission_validator.validate(form, CONTACT_FORM_RULES)
        assert result.valid
        lead = ContactLead.from_cleaned(result.cleaned)
        assert len(lead.project_scope) > 5000

        repository = SqlContactRepository(session_factory)
        repository.add(lead)
        row = repository.list_recent(1)[0]

        assert row.project_scope == lead.project_scope
        assert row.project_type == lead.project_type
        assert row.priority == lead.priority
        assert row.implementation_timeframe == lead.implementation_timeframe
        assert row.project_scale == lead.project_scale

    @pytest.mark.parametrize(
        "column", ["project_type", "priority", "project_scope", "implementation_timeframe", "project_scale"]
    )
    def test_escaped_columns_are_unbounded(self, column):
        assert isinstance(ContactSubmission.__table__.c[column].type, Text)

    def test_outage_raises_storage_unavailable(self):
        repository = SqlContactRepository(unreachable_session)

        with pytest.raises(StorageUnavailableError):
            repository.add(make_lead())
        with pytest.raises(StorageUnavailableError):
            repository.list_recent()


@pytest.mark.unit
class TestInMemoryStores:
    def test_subscription_store(self):
        store = InMemorySubscriptionStore()

        assert store.insert_if_absent(make_record())
        assert not store.insert_if_absent(make_record())
        assert len(store) == 1
        assert store.get("jane@example.com").source == "Website Newsletter Form"

    def test_contact_repository_assigns_ids_and_orders(self):
        repository = InMemoryContactRepository()
        repository.add(make_lead(0, full_name="Older"))
        repository.add(make_lead(1, full_name="Newer"))

        rows = repository.list_recent()

        assert [row.full_name for row in rows] == ["Newer", "Older"]
        assert [row.id for row in rows] == [2, 1]
        assert repository.list_recent(limit=1)[0].full_name == "Newer"


@pytest.mark.unit
def test_contact_status_values_match_existing_records():
    assert [status.value for status in ContactStatus] == ["new", "in-progress", "completed"]
