"""Contact form submissions.

``ContactLead`` is the validated submission as the domain sees it and what
every contact sink receives. ``ContactSubmission`` is its relational row.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Mapping, Optional

from sqlalchemy import DateTime, String, Text
from sqlmodel import Column, Field, Index, SQLModel


class ContactStatus(str, Enum):
    """Follow-up state of a contact submission, managed by the sales team."""

    NEW = "new"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ContactLead:
    """A validated contact request.

    Text fields are already trimmed, and free-text fields are markup-escaped by
    the contact form rules.
    """

    full_name: str
    email: str
    project_type: str
    priority: str
    project_scope: str
    implementation_timeframe: str = ""
    project_scale: str = ""
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_cleaned(cls, cleaned: Mapping[str, str], submitted_at: Optional[datetime] = None) -> "ContactLead":
        """Build a lead from the cleaned values of the contact form rules."""
        return cls(
            full_name=cleaned["fullName"],
            email=cleaned["email"].lower(),
            project_type=cleaned["projectType"],
            priority=cleaned["priority"],
            project_scope=cleaned["projectScope"],
            implementation_timeframe=cleaned.get("implementationTimeframe", ""),
            project_scale=cleaned.get("projectScale", ""),
            submitted_at=submitted_at or datetime.now(timezone.utc),
        )


class ContactSubmission(SQLModel, table=True):
    """Relational row of a contact submission.

    Attributes:
        id: Primary key.
        full_name: Submitter's name.
        email: Submitter's e-mail, lower-cased.
        project_type: Kind of project the lead asks about.
        priority: Urgency chosen in the form.
        implementation_timeframe: Optional timeframe.
        project_scale: Optional scale.
        project_scope: Free-text project description, markup-escaped. The
            escaped fields are TEXT: escaping can grow a 1000-character
            input up to six-fold.
        status: Follow-up state, ``new`` on creation.
        created_at: Submission time (UTC).
    """

    __tablename__ = "contact_submissions"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(sa_column=Column(String(254), nullable=False))
    project_type: str = Field(sa_column=Column(Text, nullable=False))
    priority: str = Field(sa_column=Column(Text, nullable=False))
    implementation_timeframe: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    project_scale: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    project_scope: str = Field(sa_column=Column(Text, nullable=False))
    status: str = Field(
        default=ContactStatus.NEW.value,
        sa_column=Column(String(20), nullable=False, default=ContactStatus.NEW.value),
    )
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    __table_args__ = (
        Index("ix_contact_submissions_email", "email"),
        Index("ix_contact_submissions_created_at", "created_at"),
        Index("ix_contact_submissions_status", "status"),
        {"extend_existing": True},
    )

    @classmethod
    def from_lead(cls, lead: ContactLead) -> "ContactSubmission":
        return cls(
            full_name=lead.full_name,
            email=lead.email,
            project_type=lead.project_type,
            priority=lead.priority,
            implementation_timeframe=lead.implementation_timeframe or None,
            project_scale=lead.project_scale or None,
            project_scope=lead.project_scope,
            status=ContactStatus.NEW.value,
            created_at=lead.submitted_at,
        )
