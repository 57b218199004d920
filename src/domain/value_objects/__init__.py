"""Domain Value Objects for the lead-capture flows.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .captcha import CaptchaOutcome, CaptchaVerdict
from .receipts import ContactReceipt, SubscriptionReceipt

__all__ = ["CaptchaOutcome", "CaptchaVerdict", "ContactReceipt", "SubscriptionReceipt"]
