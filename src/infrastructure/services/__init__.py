"""Infrastructure Services.

Concrete implementations of the domain's external collaborators.

Service Categories:
- Captcha: Google reCAPTCHA verification
- Email: template rendering and SMTP delivery
- Spreadsheet: Google Sheets REST client
"""

from .captcha import RecaptchaVerifier
from .email import LeadEmailService
from .spreadsheet import GoogleSheetsClient, build_sheets_client

__all__ = [
    "GoogleSheetsClient",
    "LeadEmailService",
    "RecaptchaVerifier",
    "build_sheets_client",
]
