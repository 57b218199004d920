from .recaptcha import RecaptchaVerifier

__all__ = ["RecaptchaVerifier"]
