"""Team-reported match results awaiting reconciliation."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

SUBMISSION_UNIQUE_CONSTRAINT = "uq_match_result_submissions_match_team"


class MatchResultStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class MatchResultSubmission(SQLModel, table=True):  # type: ignore[call-arg]
    """One team's claimed score for one match.

    The (match_id, team_id) unique constraint is what keeps two racing
    submissions from the same team from both landing; inserts that violate it
    fail instead of overwriting.
    """

    __tablename__ = "match_result_submissions"
    __table_args__ = (
        UniqueConstraint("match_id", "team_id", name=SUBMISSION_UNIQUE_CONSTRAINT),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="matches.id", index=True)
    team_id: int = Field(foreign_key="teams.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    home_team_score: int = Field(ge=0)
    away_team_score: int = Field(ge=0)
    notes: Optional[str] = Field(default=None)
    status: MatchResultStatus = Field(default=MatchResultStatus.pending, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
