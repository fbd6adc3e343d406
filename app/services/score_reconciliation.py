"""Pure comparison of two team-reported scores.

Scores are compared home/away-relative: both teams report the match from the
fixture's point of view, so (5, 3) from one side and (3, 5) from the other is
a disagreement, not a mirrored agreement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from app.models.match_results import (
    ConflictResponse,
    ConflictSubmission,
    MatchResultSubmissionRead,
)


@dataclass(frozen=True)
class ScorePair:
    home: int
    away: int

    @classmethod
    def of(cls, submission: MatchResultSubmissionRead) -> "ScorePair":
        return cls(home=submission.home_team_score, away=submission.away_team_score)


@dataclass(frozen=True)
class ScoreAgreement:
    scores: ScorePair

    is_agreement = True


@dataclass(frozen=True)
class ScoreConflict:
    first: ScorePair
    second: ScorePair

    is_agreement = False


ComparisonResult = Union[ScoreAgreement, ScoreConflict]


def compare_scores(first: ScorePair, second: ScorePair) -> ComparisonResult:
    """Return ScoreAgreement only when home and away scores both match."""
    if first.home == second.home and first.away == second.away:
        return ScoreAgreement(scores=first)
    return ScoreConflict(first=first, second=second)


def _conflict_side(submission: MatchResultSubmissionRead) -> ConflictSubmission:
    return ConflictSubmission(
        team_id=submission.team_id,
        team_name=submission.team_name or "",
        home_team_score=submission.home_team_score,
        away_team_score=submission.away_team_score,
    )


def build_conflict_payload(
    home_submission: MatchResultSubmissionRead,
    away_submission: MatchResultSubmissionRead,
) -> ConflictResponse:
    """Describe a disagreement for the caller and for escalation."""
    return ConflictResponse(
        conflict=True,
        team1_submission=_conflict_side(home_submission),
        team2_submission=_conflict_side(away_submission),
    )


def build_conflict_message(
    home_team_name: str,
    away_team_name: str,
    conflict: ConflictResponse,
) -> str:
    """Notification body sent to league managers."""
    first = conflict.team1_submission
    second = conflict.team2_submission
    return (
        f"There is a score discrepancy for match between {home_team_name} and "
        f"{away_team_name}. {first.team_name} reported "
        f"{first.home_team_score}-{first.away_team_score}; {second.team_name} "
        f"reported {second.home_team_score}-{second.away_team_score}. "
        "Please review and resolve."
    )
