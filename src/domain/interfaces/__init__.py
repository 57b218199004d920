"""Ports the lead-capture services depend on."""

from .repositories import IContactRepository, IContactSink
from .services import ICaptchaVerifier, ILeadNotifier

__all__ = ["ICaptchaVerifier", "IContactRepository", "IContactSink", "ILeadNotifier"]
