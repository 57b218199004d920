"""Response bodies of the lead-capture endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ContactAcceptedResponse(BaseModel):
    message: str = "Contact form submitted successfully"


class NewsletterAcceptedResponse(BaseModel):
    """Same body for a new and for an existing subscriber."""

    success: bool = True
    message: str = "Successfully subscribed to newsletter"


class ContactSubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int]
    full_name: str
    email: str
    project_type: str
    priority: str
    implementation_timeframe: Optional[str] = None
    project_scale: Optional[str] = None
    project_scope: str
    status: str
    created_at: datetime


class ContactListResponse(BaseModel):
    count: int
    submissions: List[ContactSubmissionResponse]


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime
