from .context import LeadCaptureContext, build_context
from .lead_capture import (
    ClientIP,
    LeadCapture,
    get_client_ip,
    get_lead_capture_context,
    require_admin_key,
)

__all__ = [
    "ClientIP",
    "LeadCapture",
    "LeadCaptureContext",
    "build_context",
    "get_client_ip",
    "get_lead_capture_context",
    "require_admin_key",
]
