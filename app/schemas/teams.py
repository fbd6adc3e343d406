"""Team and team-membership tables."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class TeamStatus(str, Enum):
    """Shared by teams and team memberships."""

    active = "active"
    inactive = "inactive"


class TeamMemberRole(str, Enum):
    captain = "captain"
    member = "member"


class Team(SQLModel, table=True):  # type: ignore[call-arg]
    __tablename__ = "teams"

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="leagues.id", index=True)
    name: str
    status: TeamStatus = Field(default=TeamStatus.active)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class TeamMember(SQLModel, table=True):  # type: ignore[call-arg]
    """Roster entry. Only `active` rows grant submission rights."""

    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    role: TeamMemberRole = Field(default=TeamMemberRole.member)
    status: TeamStatus = Field(default=TeamStatus.active, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
