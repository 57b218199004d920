import pytest
from starlette.requests import Request

from src.core.config.settings import settings
from src.core.dependencies import build_context, get_client_ip, require_admin_key
from src.core.exceptions import PermissionError
from src.domain.rate_limiting import FixedWindowThrottle
from src.infrastructure.repositories import InMemoryContactRepository


def make_request(client=("203.0.113.7", 50000), headers=None):
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/newsletter/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


@pytest.mark.unit
class TestClientIp:
    def test_socket_peer_is_used_by_default(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", False)

        request = make_request(headers={"X-Forwarded-For": "198.51.100.9"})

        assert get_client_ip(request) == "203.0.113.7"

    def test_first_forwarded_hop_when_trusted(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", True)

        request = make_request(headers={"X-Forwarded-For": "198.51.100.9, 10.0.0.1"})

        assert get_client_ip(request) == "198.51.100.9"

    def test_trusted_without_header_falls_back_to_peer(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", True)

        assert get_client_ip(make_request()) == "203.0.113.7"

    def test_unknown_when_no_address(self, monkeypatch):
        monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", False)

        assert get_client_ip(make_request(client=None)) == "unknown"


@pytest.mark.unit
class TestAdminKey:
    def test_valid_key(self):
        require_admin_key("test-admin-key")

    @pytest.mark.parametrize("key", [None, "", "wrong"])
    def test_invalid_key(self, key):
        with pytest.raises(PermissionError):
            require_admin_key(key)

    def test_empty_configured_key_disables_endpoints(self, monkeypatch):
        from pydantic import SecretStr

        monkeypatch.setattr(settings, "ADMIN_API_KEY", SecretStr(""))

        with pytest.raises(PermissionError):
            require_admin_key("")


@pytest.mark.unit
class TestBuildContext:
    def test_memory_configuration(self, notifier):
        context = build_context(settings, notifier=notifier)

        assert isinstance(context.contact_repository, InMemoryContactRepository)
        assert context.health_checks == {}
        assert not context.uses_database
        throttle = context.contact_service._throttle
        assert isinstance(throttle, FixedWindowThrottle)
        assert (throttle.limit, throttle.interval) == (3, 60.0)
        assert context.newsletter_service._throttle.limit == 5

    def test_rate_limiting_can_be_disabled(self, notifier, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)

        context = build_context(settings, notifier=notifier)

        assert context.contact_service._throttle is None
