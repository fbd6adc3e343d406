"""League user accounts.

Only the columns the results service reads live here; profile and credential
management belong to the account service.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    """Global role for a user account."""

    user = "user"
    admin = "admin"  # manager privileges in every league


class User(SQLModel, table=True):  # type: ignore[call-arg]
    """A player, captain, or league manager."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    role: UserRole = Field(default=UserRole.user, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
