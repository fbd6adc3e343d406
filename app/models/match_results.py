"""Pydantic request/response models for match result submissions."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.match_result_submissions import MatchResultStatus


class MatchResultSubmissionCreate(BaseModel):
    """Request body for a team (or league manager) reporting a score."""

    match_id: int
    home_team_score: int = Field(ge=0)
    away_team_score: int = Field(ge=0)
    notes: Optional[str] = Field(default=None)


class MatchResultSubmissionUpdate(BaseModel):
    """Manager decision on a single submission."""

    status: Literal["approved", "rejected"]
    notes: Optional[str] = Field(default=None)


class MatchResultSubmissionRead(BaseModel):
    id: int
    match_id: int
    team_id: int
    team_name: Optional[str] = Field(default=None)
    user_id: int
    username: Optional[str] = Field(default=None)
    home_team_score: int
    away_team_score: int
    notes: Optional[str] = Field(default=None)
    status: MatchResultStatus
    created_at: datetime
    updated_at: datetime


class ConflictSubmission(BaseModel):
    team_id: int
    team_name: str
    home_team_score: int
    away_team_score: int


class ConflictResponse(BaseModel):
    """Both sides' claims when their scores disagree.

    team1 is the home team's submission, team2 the away team's.
    """

    conflict: bool = True
    team1_submission: ConflictSubmission
    team2_submission: ConflictSubmission


class SubmitMatchResultResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission: Optional[MatchResultSubmissionRead] = Field(default=None)
    match_updated: bool = Field(alias="matchUpdated")
    message: str
    conflict: Optional[ConflictResponse] = Field(default=None)


class MessageResponse(BaseModel):
    message: str
