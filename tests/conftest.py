import os

# Settings are created at import time; configure a hermetic test environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SUBSCRIPTION_STORE", "memory")
os.environ.setdefault("CONTACT_STORES", "memory")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("RECAPTCHA_ENABLED", "false")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("LOG_JSON", "false")

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.dependencies import build_context
from src.domain.interfaces.services import ILeadNotifier

ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}


@pytest.fixture
def notifier():
    """E-mail collaborator that records calls and reports delivery."""
    mock = AsyncMock(spec=ILeadNotifier)
    mock.send_contact_notifications.return_value = True
    mock.send_newsletter_welcome.return_value = True
    return mock


@pytest.fixture
def lead_context(notifier):
    """Services wired to in-memory stores and throttles, built from the test settings."""
    context = build_context(settings, notifier=notifier)
    yield context
    context.close()


@pytest.fixture
def client(lead_context):
    app = create_application(lead_context)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)
