"""League and league-membership tables."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class LeagueStatus(str, Enum):
    pending = "pending"
    active = "active"
    completed = "completed"
    inactive = "inactive"


class LeagueMemberRole(str, Enum):
    manager = "manager"
    player = "player"
    spectator = "spectator"


class League(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "leagues"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    status: LeagueStatus = Field(default=LeagueStatus.active)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class LeagueMember(SQLModel, table=True):  # type: ignore[call-arg]
    """A user's role within one league (one row per league/user)."""

    __tablename__ = "league_members"
    __table_args__ = (
        UniqueConstraint(
            "league_id", "user_id", name="uq_league_members_league_user"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="leagues.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    role: LeagueMemberRole = Field(default=LeagueMemberRole.spectator, index=True)
    joined_at: datetime = Field(default_factory=datetime.utcnow)
