import pytest

from tests.factories.leads import make_newsletter_payload

NEWSLETTER_URL = "/api/v1/newsletter/"
SUBSCRIBED = {"success": True, "message": "Successfully subscribed to newsletter"}


@pytest.mark.integration
class TestSubscribe:
    def test_new_address_is_subscribed_and_welcomed(self, client, lead_context, notifier):
        response = client.post(NEWSLETTER_URL, json={"email": "reader@example.com"})

        assert response.status_code == 200
        assert response.json() == SUBSCRIBED
        notifier.send_newsletter_welcome.assert_awaited_once_with("reader@example.com")
        assert lead_context.metrics.outcome_count("newsletter", "created") == 1

    def test_existing_address_gets_the_same_answer(self, client, lead_context, notifier):
        client.post(NEWSLETTER_URL, json={"email": "reader@example.com"})

        response = client.post(NEWSLETTER_URL, json={"email": "  Reader@Example.COM "})

        assert response.status_code == 200
        assert response.json() == SUBSCRIBED
        assert notifier.send_newsletter_welcome.await_count == 1
        assert lead_context.metrics.outcome_count("newsletter", "already_subscribed") == 1

    @pytest.mark.parametrize("email", ["", "   ", "reader@", "two@@example.com", "spaced out@example.com"])
    def test_invalid_address_is_rejected(self, client, email):
        response = client.post(NEWSLETTER_URL, json={"email": email})

        assert response.status_code == 400
        assert "email" in response.json()["field_errors"]

    def test_missing_address_is_rejected(self, client):
        response = client.post(NEWSLETTER_URL, json={})

        assert response.status_code == 400
        assert response.json()["field_errors"] == {"email": "Email is required"}

    def test_sixth_request_in_a_minute_is_throttled(self, client, notifier):
        for _ in range(5):
            assert client.post(NEWSLETTER_URL, json=make_newsletter_payload()).status_code == 200

        response = client.post(NEWSLETTER_URL, json=make_newsletter_payload())

        assert response.status_code == 429
        assert "Retry-After" in response.headers
        assert notifier.send_newsletter_welcome.await_count == 5

    def test_flows_are_throttled_independently(self, client):
        for _ in range(5):
            client.post(NEWSLETTER_URL, json=make_newsletter_payload())

        response = client.post("/api/v1/contact/", json={})

        assert response.status_code == 400
