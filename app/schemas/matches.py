"""Scheduled matches between two teams of a league."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel


class MatchStatus(str, Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class Match(SQLModel, table=True):  # type: ignore[call-arg]
    """A fixture created by schedule generation.

    Scores stay null until the match is finalized, either by two agreeing
    team submissions or by a league manager.
    """

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint(
            "home_team_id != away_team_id", name="ck_matches_different_teams"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="leagues.id", index=True)
    home_team_id: int = Field(foreign_key="teams.id", index=True)
    away_team_id: int = Field(foreign_key="teams.id", index=True)
    match_date: datetime = Field(default_factory=datetime.utcnow)
    status: MatchStatus = Field(default=MatchStatus.scheduled, index=True)
    home_team_score: Optional[int] = Field(default=None)
    away_team_score: Optional[int] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
