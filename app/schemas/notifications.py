"""In-app notifications and the outbound email queue."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class NotificationType(str, Enum):
    match_result = "match_result"
    match_reminder = "match_reminder"
    system_message = "system_message"


class Notification(SQLModel, table=True):  # type: ignore[call-arg]
    """A message shown in a user's notification inbox."""

    __tablename__ = "notifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str
    body: str
    type: NotificationType = Field(index=True)
    action_id: Optional[int] = Field(default=None)  # e.g. the match to review
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class EmailOutbox(SQLModel, table=True):  # type: ignore[call-arg]
    """Outbox-backed email records, drained by the email worker."""

    __tablename__ = "email_outbox"

    id: Optional[int] = Field(default=None, primary_key=True)
    to_email: str = Field(index=True)
    subject: str
    body: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    sent_at: Optional[datetime] = Field(default=None, index=True)
    provider: Optional[str] = Field(default=None)
