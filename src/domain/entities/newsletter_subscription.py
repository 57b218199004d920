"""Relational row backing the newsletter subscription guard."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlmodel import Column, Field, SQLModel

from src.domain.subscriptions import SubscriptionRecord


class NewsletterSubscription(SQLModel, table=True):
    """One newsletter sign-up.

    The unique constraint on ``email`` is what makes concurrent registrations
    of the same address safe across processes; the application always stores
    the normalised (lower-cased) address.
    """

    __tablename__ = "newsletter_subscriptions"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(sa_column=Column(String(254), unique=True, index=True, nullable=False))
    source: str = Field(sa_column=Column(String(100), nullable=False))
    recorded_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))

    __table_args__ = ({"extend_existing": True},)

    @classmethod
    def from_record(cls, record: SubscriptionRecord) -> "NewsletterSubscription":
        return cls(email=record.identity, source=record.source, recorded_at=record.recorded_at)

    def to_record(self) -> SubscriptionRecord:
        return SubscriptionRecord(identity=self.email, recorded_at=self.recorded_at, source=self.source)
