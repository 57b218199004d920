from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from src.core.config.email import EmailSettings
from src.core.exceptions import EmailServiceError, TemplateRenderError
from src.domain.entities.contact_submission import ContactLead
from src.domain.validation import CONTACT_FORM_RULES, submission_validator
from src.infrastructure.services.email import LeadEmailService
from tests.factories.leads import make_contact_payload

TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "src" / "templates" / "email"


@pytest.fixture
def email_settings():
    return EmailSettings(
        EMAIL_TEST_MODE=True,
        EMAIL_TEMPLATES_DIR=str(TEMPLATES_DIR),
        CONTACT_NOTIFICATION_EMAIL="sales@example.com",
        COMPANY_NAME="Acme Studio",
    )


@pytest.fixture
def service(email_settings):
    return LeadEmailService(email_settings)


@pytest.fixture
def lead():
    payload = make_contact_payload(
        fullName="Jane Doe",
        email="jane@example.com",
        projectType="Web & Mobile",
        projectScope="Build a <portal> for \"partners\"",
    )
    cleaned = submission_validator.validate(payload, CONTACT_FORM_RULES).cleaned
    return ContactLead.from_cleaned(cleaned, submitted_at=datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc))


@pytest.mark.unit
class TestLeadEmailService:
    def test_sanitised_fields_are_not_escaped_twice(self, service, lead):
        html = service.render_template("contact_notification.html", **service._lead_context(lead))

        assert "Build a &lt;portal&gt; for &quot;partners&quot;" in html
        assert "&amp;lt;" not in html
        assert "jane@example.com" in html
        assert "2026-03-01 09:30:00 UTC" in html

    def test_missing_template(self, service):
        with pytest.raises(TemplateRenderError):
            service.render_template("does_not_exist.html")

    @pytest.mark.asyncio
    async def test_contact_notifications_in_test_mode(self, service, lead, mocker):
        send = mocker.spy(service, "send_email")

        delivered = await service.send_contact_notifications(lead)

        assert delivered
        assert send.call_count == 2
        notification, acknowledgement = send.call_args_list
        assert notification.args[0] == "sales@example.com"
        assert notification.args[1] == "New Contact Form Submission: Web & Mobile (High)"
        assert notification.kwargs["reply_to"] == "jane@example.com"
        assert acknowledgement.args[0] == "jane@example.com"
        assert acknowledgement.args[1] == "Thank you for contacting Acme Studio"

    @pytest.mark.asyncio
    async def test_missing_recipient_still_acknowledges(self, email_settings, lead, mocker):
        email_settings.CONTACT_NOTIFICATION_EMAIL = None
        email_settings.SMTP_USERNAME = None
        service = LeadEmailService(email_settings)
        send = mocker.spy(service, "send_email")

        delivered = await service.send_contact_notifications(lead)

        assert not delivered
        assert send.call_count == 1

    @pytest.mark.asyncio
    async def test_newsletter_welcome(self, service, mocker):
        send = mocker.spy(service, "send_email")

        assert await service.send_newsletter_welcome("reader@example.com")
        assert send.call_args.args[:2] == ("reader@example.com", "Welcome to the Acme Studio newsletter!")

    @pytest.mark.asyncio
    async def test_delivery_failure_is_reported_not_raised(self, service, lead):
        service.send_email = AsyncMock(side_effect=EmailServiceError("smtp down"))

        assert not await service.send_contact_notifications(lead)

    @pytest.mark.asyncio
    async def test_production_mode_sends_through_fastmail(self, email_settings):
        email_settings.EMAIL_TEST_MODE = False
        service = LeadEmailService(email_settings)
        service.fastmail = AsyncMock()

        assert await service.send_email("to@example.com", "Subject", "<p>Hi</p>", reply_to="from@example.com")

        message = service.fastmail.send_message.await_args.args[0]
        assert message.subject == "Subject"
        assert "to@example.com" in str(message.recipients[0])
