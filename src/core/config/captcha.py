"""
Bot-mitigation (reCAPTCHA) settings.
"""
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class CaptchaSettings(BaseSettings):
    """
    Defines how submission endpoints verify reCAPTCHA tokens.

    RECAPTCHA_REQUIRED decides whether a request without a token is rejected;
    when it is off, a missing token (or the front end's "no-recaptcha"
    placeholder) simply skips verification. RECAPTCHA_FAIL_OPEN decides what
    happens when Google cannot be reached.
    """
    RECAPTCHA_ENABLED: bool = False
    RECAPTCHA_SECRET_KEY: SecretStr = SecretStr("")
    RECAPTCHA_REQUIRED: bool = False
    RECAPTCHA_MIN_SCORE: float = Field(default=0.5, ge=0.0, le=1.0)
    RECAPTCHA_FAIL_OPEN: bool = True
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    RECAPTCHA_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
