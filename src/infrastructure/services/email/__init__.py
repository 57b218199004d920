from .email_service import LeadEmailService

__all__ = ["LeadEmailService"]
