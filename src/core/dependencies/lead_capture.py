from __future__ import annotations

import hmac
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from src.core.config.settings import settings
from src.core.dependencies.context import LeadCaptureContext
from src.core.exceptions import PermissionError

__all__ = [
    "get_lead_capture_context",
    "get_client_ip",
    "require_admin_key",
    "LeadCapture",
    "ClientIP",
]


def get_lead_capture_context(request: Request) -> LeadCaptureContext:
    """The context built at startup (see ``core.lifecycle``)."""
    return request.app.state.lead_capture


def get_client_ip(request: Request) -> str:
    """Address used as the rate-limit identifier of a request.

    The first ``X-Forwarded-For`` hop is honoured only when
    ``TRUST_PROXY_HEADERS`` is on; otherwise the socket peer is used.
    Requests without either share the ``"unknown"`` identifier.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def require_admin_key(x_api_key: Annotated[Optional[str], Header()] = None) -> None:
    """Guards the operational endpoints with the ``X-API-Key`` header.

    An empty ``ADMIN_API_KEY`` disables them entirely.
    """
    expected = settings.ADMIN_API_KEY.get_secret_value()
    if not expected or not x_api_key or not secrets_equal(x_api_key, expected):
        raise PermissionError()


def secrets_equal(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode(), expected.encode())


LeadCapture = Annotated[LeadCaptureContext, Depends(get_lead_capture_context)]
ClientIP = Annotated[str, Depends(get_client_ip)]
