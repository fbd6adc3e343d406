"""Persistence for team-reported match results."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.match_results import MatchResultSubmissionRead
from app.schemas.match_result_submissions import (
    SUBMISSION_UNIQUE_CONSTRAINT,
    MatchResultStatus,
    MatchResultSubmission,
)
from app.schemas.teams import Team
from app.schemas.users import User
from app.services.errors import DuplicateSubmissionError

logger = logging.getLogger(__name__)

# SQLite does not report constraint names, only the offending columns.
_SQLITE_DUPLICATE_MARKER = "UNIQUE constraint failed: match_result_submissions"


def is_duplicate_submission_violation(exc: IntegrityError) -> bool:
    """True if the integrity error is the per-(match, team) unique constraint."""
    message = str(exc.orig)
    return SUBMISSION_UNIQUE_CONSTRAINT in message or _SQLITE_DUPLICATE_MARKER in message


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _to_read(row: Mapping[str, Any]) -> MatchResultSubmissionRead:
    return MatchResultSubmissionRead(
        id=row["id"],
        match_id=row["match_id"],
        team_id=row["team_id"],
        team_name=row["team_name"],
        user_id=row["user_id"],
        username=row["username"],
        home_team_score=row["home_team_score"],
        away_team_score=row["away_team_score"],
        notes=row["notes"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SqlSubmissionLedger:
    """Submission rows for one session; callers own the transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _read_query(self):
        return (
            select(
                MatchResultSubmission.id,
                MatchResultSubmission.match_id,
                MatchResultSubmission.team_id,
                Team.name.label("team_name"),  # type: ignore[attr-defined]
                MatchResultSubmission.user_id,
                User.username.label("username"),  # type: ignore[attr-defined]
                MatchResultSubmission.home_team_score,
                MatchResultSubmission.away_team_score,
                MatchResultSubmission.notes,
                MatchResultSubmission.status,
                MatchResultSubmission.created_at,
                MatchResultSubmission.updated_at,
            )  # type: ignore[call-overload]
            .join(Team, Team.id == MatchResultSubmission.team_id)
            .outerjoin(User, User.id == MatchResultSubmission.user_id)
        )

    async def insert(self, submission: MatchResultSubmission) -> MatchResultSubmission:
        """Insert a new submission, failing fast on a duplicate (match, team).

        The unique constraint is the authority; no existence check is made
        beforehand. On a duplicate the session is left needing a rollback,
        which the enclosing ``db.begin()`` block performs when the error
        propagates.
        """
        self.session.add(submission)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_duplicate_submission_violation(exc):
                logger.info(
                    "Rejected duplicate submission: match=%s team=%s",
                    submission.match_id,
                    submission.team_id,
                )
                raise DuplicateSubmissionError() from exc
            raise
        return submission

    async def get(
        self,
        submission_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[MatchResultSubmission]:
        stmt = select(MatchResultSubmission).where(
            MatchResultSubmission.id == submission_id  # type: ignore[arg-type]
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def get_read(self, submission_id: int) -> Optional[MatchResultSubmissionRead]:
        """Fetch one submission with its team name and submitter username."""
        row = (
            await self.session.execute(
                self._read_query().where(
                    MatchResultSubmission.id == submission_id  # type: ignore[arg-type]
                )
            )
        ).mappings().first()
        return _to_read(row) if row is not None else None

    async def list_for_match(self, match_id: int) -> list[MatchResultSubmissionRead]:
        """All submissions for a match, oldest first."""
        result = await self.session.execute(
            self._read_query()
            .where(MatchResultSubmission.match_id == match_id)  # type: ignore[arg-type]
            .order_by(
                MatchResultSubmission.created_at,  # type: ignore[arg-type]
                MatchResultSubmission.id,  # type: ignore[arg-type]
            )
        )
        return [_to_read(row) for row in result.mappings().all()]

    async def set_status(
        self,
        submission_ids: Sequence[int],
        status: MatchResultStatus,
    ) -> None:
        if not submission_ids:
            return
        await self.session.execute(
            update(MatchResultSubmission)
            .where(
                MatchResultSubmission.id.in_(list(submission_ids))  # type: ignore[union-attr]
            )
            .values(status=status, updated_at=_utcnow())
            .execution_options(synchronize_session=False)
        )

    async def record_decision(
        self,
        submission: MatchResultSubmission,
        status: MatchResultStatus,
        notes: Optional[str],
    ) -> MatchResultSubmission:
        """Apply a manager decision to one submission (notes only if given)."""
        submission.status = status
        if notes is not None:
            submission.notes = notes
        submission.updated_at = _utcnow()
        self.session.add(submission)
        await self.session.flush()
        return submission

    async def delete(self, submission_id: int) -> bool:
        result = await self.session.execute(
            delete(MatchResultSubmission)
            .where(MatchResultSubmission.id == submission_id)  # type: ignore[arg-type]
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
