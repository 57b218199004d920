"""Email service sending the lead-capture notifications.

Three messages exist:

- contact notification: to the team inbox, reply-to set to the submitter
- contact acknowledgement: to the submitter
- newsletter welcome: to a new subscriber

Templates are Jinja2 files under ``EMAIL_TEMPLATES_DIR`` rendered with
auto-escaping. Free-text contact fields arrive markup-escaped from the form
rules and are passed to the templates as ``Markup`` so they are not escaped a
second time.
"""

import html
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound
from markupsafe import Markup
from structlog import get_logger

from src.core.config.email import EmailSettings
from src.core.exceptions import EmailServiceError, TemplateRenderError
from src.domain.entities.contact_submission import ContactLead
from src.domain.interfaces.services import ILeadNotifier
from src.domain.security.logging_service import secure_logging_service

logger = get_logger(__name__)

CONTACT_NOTIFICATION_TEMPLATE = "contact_notification.html"
CONTACT_ACKNOWLEDGEMENT_TEMPLATE = "contact_acknowledgement.html"
NEWSLETTER_WELCOME_TEMPLATE = "newsletter_welcome.html"


class LeadEmailService(ILeadNotifier):
    """Renders and delivers the lead-capture emails.

    In test mode (development and test environments) messages are rendered
    and logged but never handed to SMTP.

    Attributes:
        settings: Email configuration settings
        jinja_env: Jinja2 environment for template rendering
        fastmail: FastMail instance for email delivery, None in test mode
    """

    def __init__(self, settings: EmailSettings):
        self.settings = settings
        self._setup_jinja_environment()
        self._setup_fastmail()

        logger.info(
            "email_service_initialized",
            test_mode=settings.EMAIL_TEST_MODE,
            smtp_host=settings.SMTP_HOST,
            templates_dir=settings.EMAIL_TEMPLATES_DIR,
        )

    def _setup_jinja_environment(self) -> None:
        template_dir = Path(self.settings.EMAIL_TEMPLATES_DIR)
        if not template_dir.exists():
            logger.warning("email_templates_dir_missing", path=str(template_dir))

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.jinja_env.filters["format_datetime"] = self._format_datetime_filter

    def _setup_fastmail(self) -> None:
        if self.settings.EMAIL_TEST_MODE:
            self.fastmail = None
            logger.info("email_service_test_mode")
            return

        try:
            config = ConnectionConfig(
                MAIL_USERNAME=self.settings.SMTP_USERNAME or "",
                MAIL_PASSWORD=self.settings.SMTP_PASSWORD.get_secret_value() if self.settings.SMTP_PASSWORD else "",
                MAIL_FROM=self.settings.FROM_EMAIL,
                MAIL_PORT=self.settings.SMTP_PORT,
                MAIL_SERVER=self.settings.SMTP_HOST,
                MAIL_FROM_NAME=self.settings.FROM_NAME,
                MAIL_STARTTLS=self.settings.SMTP_USE_TLS,
                MAIL_SSL_TLS=self.settings.SMTP_USE_SSL,
                USE_CREDENTIALS=bool(self.settings.SMTP_USERNAME and self.settings.SMTP_PASSWORD),
                VALIDATE_CERTS=True,
            )
            self.fastmail = FastMail(config)
        except Exception as e:
            logger.error("fastmail_configuration_failed", error=str(e))
            raise EmailServiceError(f"Failed to configure email service: {e}")

    def render_template(self, template_name: str, **context: Any) -> str:
        """Render an email template.

        Raises:
            TemplateRenderError: If the template is missing or fails to render
        """
        try:
            return self.jinja_env.get_template(template_name).render(**context)
        except TemplateNotFound:
            logger.error("email_template_not_found", template=template_name)
            raise TemplateRenderError(f"Template file not found: {template_name}")
        except TemplateError as e:
            logger.error("email_template_render_failed", template=template_name, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {e}")

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        reply_to: Optional[str] = None,
    ) -> bool:
        """Send one HTML email.

        Raises:
            EmailServiceError: If delivery fails
        """
        if self.settings.EMAIL_TEST_MODE:
            logger.info(
                "email_sent_test_mode",
                to_email=secure_logging_service.mask_email(to_email),
                subject=subject,
                html_length=len(html_content),
            )
            return True

        if not self.fastmail:
            raise EmailServiceError("FastMail not configured for production mode")

        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=html_content,
            subtype=MessageType.html,
            reply_to=[reply_to] if reply_to else [],
        )
        try:
            await self.fastmail.send_message(message)
        except Exception as e:
            logger.error(
                "email_send_failed",
                to_email=secure_logging_service.mask_email(to_email),
                subject=subject,
                error=str(e),
            )
            raise EmailServiceError(f"Failed to send email: {e}")

        logger.info("email_sent", to_email=secure_logging_service.mask_email(to_email), subject=subject)
        return True

    async def send_contact_notifications(self, lead: ContactLead) -> bool:
        """Notify the team and acknowledge the submitter.

        Both messages are attempted even if the first fails. Returns True only
        if both went out.
        """
        context = self._lead_context(lead)
        delivered = True

        recipient = self.settings.notification_recipient
        if recipient:
            subject = f"New Contact Form Submission: {html.unescape(lead.project_type)} ({html.unescape(lead.priority)})"
            delivered &= await self._deliver(
                CONTACT_NOTIFICATION_TEMPLATE, recipient, subject, context, reply_to=lead.email
            )
        else:
            logger.warning("contact_notification_recipient_missing")
            delivered = False

        delivered &= await self._deliver(
            CONTACT_ACKNOWLEDGEMENT_TEMPLATE,
            lead.email,
            f"Thank you for contacting {self.settings.COMPANY_NAME}",
            context,
        )
        return delivered

    async def send_newsletter_welcome(self, email: str) -> bool:
        return await self._deliver(
            NEWSLETTER_WELCOME_TEMPLATE,
            email,
            f"Welcome to the {self.settings.COMPANY_NAME} newsletter!",
            self._base_context(),
        )

    async def _deliver(
        self,
        template_name: str,
        to_email: str,
        subject: str,
        context: Dict[str, Any],
        reply_to: Optional[str] = None,
    ) -> bool:
        try:
            body = self.render_template(template_name, **context)
            return await self.send_email(to_email, subject, body, reply_to=reply_to)
        except EmailServiceError as e:
            logger.warning("lead_email_not_delivered", template=template_name, code=e.code)
            return False

    def _base_context(self) -> Dict[str, Any]:
        return {
            "company_name": self.settings.COMPANY_NAME,
            "site_url": self.settings.SITE_URL,
        }

    def _lead_context(self, lead: ContactLead) -> Dict[str, Any]:
        context = self._base_context()
        context.update(
            full_name=lead.full_name,
            email=lead.email,
            # Already escaped by the contact form rules.
            project_type=Markup(lead.project_type),
            priority=Markup(lead.priority),
            project_scope=Markup(lead.project_scope),
            implementation_timeframe=Markup(lead.implementation_timeframe),
            project_scale=Markup(lead.project_scale),
            submitted_at=lead.submitted_at,
        )
        return context

    def _format_datetime_filter(self, value, format_string="%Y-%m-%d %H:%M:%S %Z"):
        if value is None:
            return ""
        return value.strftime(format_string)
