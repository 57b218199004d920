import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from src.core.exceptions import StorageUnavailableError
from src.domain.subscriptions import (
    RegistrationStatus,
    SubscriptionGuard,
    SubscriptionRecord,
    SubscriptionStore,
    normalize_identity,
)
from src.infrastructure.repositories import InMemorySubscriptionStore

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class DictStore(SubscriptionStore):
    """Store relying on the default check-then-insert."""

    def __init__(self):
        self.records = {}

    def exists(self, identity):
        return identity in self.records

    def insert(self, record):
        self.records[record.identity] = record


@pytest.fixture
def store():
    return InMemorySubscriptionStore()


@pytest.fixture
def guard(store):
    return SubscriptionGuard(store, clock=lambda: FIXED_NOW)


@pytest.mark.unit
class TestSubscriptionGuard:
    def test_first_registration_is_created(self, guard, store):
        result = guard.register_if_new("jane@example.com", "Website Newsletter Form")

        assert result.status is RegistrationStatus.CREATED
        assert result.created
        assert result.record == SubscriptionRecord("jane@example.com", FIXED_NOW, "Website Newsletter Form")
        assert store.exists("jane@example.com")

    def test_repeat_registration_reports_existing(self, guard, store):
        guard.register_if_new("jane@example.com", "form")
        result = guard.register_if_new("jane@example.com", "form")

        assert result.status is RegistrationStatus.ALREADY_EXISTS
        assert result.record is None
        assert len(store) == 1

    def test_identity_is_normalised(self, guard, store):
        guard.register_if_new("  Jane@Example.COM ", "form")
        result = guard.register_if_new("jane@example.com", "form")

        assert result.status is RegistrationStatus.ALREADY_EXISTS
        assert result.identity == "jane@example.com"

    def test_blank_identity_is_rejected(self, guard):
        with pytest.raises(ValueError):
            guard.register_if_new("   ", "form")

    def test_storage_outage_propagates(self):
        store = MagicMock(spec=SubscriptionStore)
        store.insert_if_absent.side_effect = StorageUnavailableError("down")
        guard = SubscriptionGuard(store)

        with pytest.raises(StorageUnavailableError):
            guard.register_if_new("jane@example.com", "form")

    def test_default_insert_if_absent_checks_first(self):
        store = DictStore()
        guard = SubscriptionGuard(store, clock=lambda: FIXED_NOW)

        assert guard.register_if_new("a@b.co", "form").created
        assert not guard.register_if_new("A@B.CO", "form").created
        assert list(store.records) == ["a@b.co"]

    def test_concurrent_registrations_create_once(self, guard):
        results = []
        lock = threading.Lock()
        start = threading.Barrier(20)

        def register():
            start.wait()
            result = guard.register_if_new("race@example.com", "form")
            with lock:
                results.append(result.status)

        threads = [threading.Thread(target=register) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(RegistrationStatus.CREATED) == 1
        assert results.count(RegistrationStatus.ALREADY_EXISTS) == 19


@pytest.mark.unit
class TestSubscriptionRecord:
    def test_normalize_identity(self):
        assert normalize_identity("  MiXed@Case.Org\n") == "mixed@case.org"

    def test_rejects_empty_identity(self):
        with pytest.raises(ValueError):
            SubscriptionRecord(identity="", recorded_at=FIXED_NOW, source="form")

    def test_rejects_unnormalised_identity(self):
        with pytest.raises(ValueError):
            SubscriptionRecord(identity="Jane@Example.com", recorded_at=FIXED_NOW, source="form")
