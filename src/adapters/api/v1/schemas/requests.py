"""Request bodies of the public form endpoints.

The schemas only shape the transport: every field is an optional string so a
missing or blank value reaches the submission validator, which produces the
per-field messages the forms display. Numbers are accepted and turned into
strings; lists and objects are rejected as an invalid body.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FormRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")

    recaptcha_token: Optional[str] = Field(default=None, alias="recaptchaToken")

    def to_form_fields(self) -> Dict[str, Any]:
        """Field values keyed by their form names (camelCase), unset fields as None."""
        return self.model_dump(by_alias=True)


class ContactRequest(FormRequest):
    """Contact form as posted by the site.

    Example:
        {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "projectType": "Web application",
            "priority": "High",
            "projectScope": "We need a customer portal for our clients.",
            "implementationTimeframe": "Q3",
            "projectScale": "Medium",
            "recaptchaToken": "..."
        }
    """

    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    project_type: Optional[str] = Field(default=None, alias="projectType")
    priority: Optional[str] = None
    project_scope: Optional[str] = Field(default=None, alias="projectScope")
    implementation_timeframe: Optional[str] = Field(default=None, alias="implementationTimeframe")
    project_scale: Optional[str] = Field(default=None, alias="projectScale")


class NewsletterRequest(FormRequest):
    """Newsletter form: ``{"email": "jane@example.com", "recaptchaToken": "..."}``."""

    email: Optional[str] = None
