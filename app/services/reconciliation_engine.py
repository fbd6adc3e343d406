"""Match result reconciliation.

Both teams in a match report the score independently. The first report waits;
the second is compared against it. Matching reports finalize the match and
approve both submissions; differing reports leave everything pending and are
escalated to the league managers. League managers who are not on either team
can bypass the process and finalize a match directly.

Every operation runs in a single transaction on the engine's session. The
match row is locked before any submission is written, so two reports for the
same match are processed one after the other: whichever commits second sees
both rows.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.match_results import (
    ConflictResponse,
    MatchResultSubmissionCreate,
    MatchResultSubmissionRead,
    MatchResultSubmissionUpdate,
    SubmitMatchResultResponse,
)
from app.schemas.match_result_submissions import (
    MatchResultStatus,
    MatchResultSubmission,
)
from app.services.audit_service import AuditTrail
from app.services.eligibility import (
    SubmitterRole,
    can_view_match_results,
    resolve_submitter_role,
    team_for_role,
)
from app.services.errors import ForbiddenError, InvalidStateError, NotFoundError
from app.services.escalation_notifier import (
    EscalationNotifier,
    NotificationEscalationNotifier,
)
from app.services.match_record_store import (
    MatchDetails,
    MatchRecordStore,
    SqlMatchRecordStore,
)
from app.services.membership_service import MembershipOracle, SqlMembershipOracle
from app.services.score_reconciliation import (
    ScoreAgreement,
    ScorePair,
    build_conflict_payload,
    compare_scores,
)
from app.services.submission_ledger import SqlSubmissionLedger

logger = logging.getLogger(__name__)

WAITING_MESSAGE = "Match result submitted, waiting for opponent submission"
AGREED_MESSAGE = "Match results matched and have been recorded"
CONFLICT_MESSAGE = "Score discrepancy detected, league managers have been notified"
MANAGER_OVERRIDE_MESSAGE = "Match score updated by league manager"
COMPLETED_MATCH_MESSAGE = "Cannot submit result for a completed match"


def _find_team_submission(
    submissions: list[MatchResultSubmissionRead],
    team_id: int,
) -> Optional[MatchResultSubmissionRead]:
    return next((s for s in submissions if s.team_id == team_id), None)


class ReconciliationEngine:
    """Entry point for submitting, adjudicating and removing match results."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        membership: MembershipOracle,
        matches: MatchRecordStore,
        ledger: SqlSubmissionLedger,
        notifier: EscalationNotifier,
        audit: AuditTrail,
    ) -> None:
        self.session = session
        self.membership = membership
        self.matches = matches
        self.ledger = ledger
        self.notifier = notifier
        self.audit = audit

    @classmethod
    def for_session(cls, session: AsyncSession) -> "ReconciliationEngine":
        """Build an engine whose collaborators all share ``session``."""
        return cls(
            session,
            membership=SqlMembershipOracle(session),
            matches=SqlMatchRecordStore(session),
            ledger=SqlSubmissionLedger(session),
            notifier=NotificationEscalationNotifier(session),
            audit=AuditTrail(session),
        )

    async def _load_match(self, match_id: int, *, for_update: bool = False) -> MatchDetails:
        match = await self.matches.get_match_details(match_id, for_update=for_update)
        if match is None:
            raise NotFoundError("Match")
        return match

    async def _load_submission(
        self, submission_id: int, *, for_update: bool = False
    ) -> MatchResultSubmission:
        submission = await self.ledger.get(submission_id, for_update=for_update)
        if submission is None:
            raise NotFoundError("Submission")
        return submission

    async def submit(
        self,
        user_id: int,
        data: MatchResultSubmissionCreate,
    ) -> SubmitMatchResultResponse:
        """Record a score report and reconcile it against the opponent's.

        Raises:
            NotFoundError: the match does not exist.
            InvalidStateError: the match is already completed.
            ForbiddenError: the user is on neither team and not a manager.
            DuplicateSubmissionError: the user's team already reported.
        """
        conflict: Optional[ConflictResponse] = None

        async with self.session.begin():
            match = await self._load_match(data.match_id, for_update=True)
            if match.is_completed:
                raise InvalidStateError(COMPLETED_MATCH_MESSAGE)

            role = await resolve_submitter_role(self.membership, user_id, match)
            if role == SubmitterRole.league_manager:
                return await self._override_score(user_id, match, data)
            if role == SubmitterRole.none:
                raise ForbiddenError(
                    "User is not a member of either team in this match"
                )

            submission = await self.ledger.insert(
                MatchResultSubmission(
                    match_id=match.id,
                    team_id=team_for_role(role, match),
                    user_id=user_id,
                    home_team_score=data.home_team_score,
                    away_team_score=data.away_team_score,
                    notes=data.notes,
                    status=MatchResultStatus.pending,
                )
            )
            assert submission.id is not None
            outcome, conflict = await self._reconcile(match, submission.id)

        if conflict is not None:
            await self._escalate(match, conflict)
        return outcome

    async def _override_score(
        self,
        user_id: int,
        match: MatchDetails,
        data: MatchResultSubmissionCreate,
    ) -> SubmitMatchResultResponse:
        """Finalize directly with the manager's score; no ledger row."""
        finalized = await self.matches.finalize_match(
            match.id, data.home_team_score, data.away_team_score
        )
        if not finalized:
            raise InvalidStateError(COMPLETED_MATCH_MESSAGE)

        self.audit.record(
            user_id=user_id,
            action="match.score_override",
            entity_type="match",
            entity_id=match.id,
            details={
                "home_team_score": data.home_team_score,
                "away_team_score": data.away_team_score,
                "previous_status": match.status.value,
                "notes": data.notes,
            },
        )
        logger.info(
            "Match %s finalized by league manager %s at %s-%s",
            match.id,
            user_id,
            data.home_team_score,
            data.away_team_score,
        )
        return SubmitMatchResultResponse(
            submission=None,
            match_updated=True,
            message=MANAGER_OVERRIDE_MESSAGE,
        )

    async def _reconcile(
        self,
        match: MatchDetails,
        submission_id: int,
    ) -> tuple[SubmitMatchResultResponse, Optional[ConflictResponse]]:
        """Compare both sides' reports once the second one is in."""
        submissions = await self.ledger.list_for_match(match.id)
        home = _find_team_submission(submissions, match.home_team_id)
        away = _find_team_submission(submissions, match.away_team_id)

        if home is None or away is None:
            own = await self.ledger.get_read(submission_id)
            return (
                SubmitMatchResultResponse(
                    submission=own, match_updated=False, message=WAITING_MESSAGE
                ),
                None,
            )

        comparison = compare_scores(ScorePair.of(home), ScorePair.of(away))
        if isinstance(comparison, ScoreAgreement):
            finalized = await self.matches.finalize_match(
                match.id, comparison.scores.home, comparison.scores.away
            )
            if not finalized:
                raise InvalidStateError(COMPLETED_MATCH_MESSAGE)
            await self.ledger.set_status([home.id, away.id], MatchResultStatus.approved)
            logger.info(
                "Match %s finalized by agreement at %s-%s",
                match.id,
                comparison.scores.home,
                comparison.scores.away,
            )
            own = await self.ledger.get_read(submission_id)
            return (
                SubmitMatchResultResponse(
                    submission=own, match_updated=True, message=AGREED_MESSAGE
                ),
                None,
            )

        conflict = build_conflict_payload(home, away)
        logger.info(
            "Score conflict on match %s: home reported %s-%s, away reported %s-%s",
            match.id,
            home.home_team_score,
            home.away_team_score,
            away.home_team_score,
            away.away_team_score,
        )
        own = await self.ledger.get_read(submission_id)
        return (
            SubmitMatchResultResponse(
                submission=own,
                match_updated=False,
                message=CONFLICT_MESSAGE,
                conflict=conflict,
            ),
            conflict,
        )

    async def _escalate(self, match: MatchDetails, conflict: ConflictResponse) -> None:
        """Notify each league manager once; failures never undo the submission."""
        try:
            async with self.session.begin():
                manager_ids = await self.membership.list_league_managers(match.league_id)
                for manager_id in manager_ids:
                    await self.notifier.notify_conflict(manager_id, match, conflict)
        except SQLAlchemyError:
            logger.exception("Failed to escalate score conflict for match %s", match.id)
            return
        logger.info(
            "Escalated conflict on match %s to %d manager(s)", match.id, len(manager_ids)
        )

    async def update_submission_status(
        self,
        user_id: int,
        submission_id: int,
        data: MatchResultSubmissionUpdate,
    ) -> MatchResultSubmissionRead:
        """Apply a league manager's decision to a single submission.

        Approving finalizes a not-yet-completed match with the approved
        submission's score. The other team's submission is left as it is;
        reconciling it is up to the manager.
        """
        async with self.session.begin():
            submission = await self._load_submission(submission_id)
            match = await self._load_match(submission.match_id, for_update=True)
            if not await self.membership.is_league_manager(user_id, match.league_id):
                raise ForbiddenError("Only league managers can update submission status")
            # a delete may have committed before the match lock was taken
            submission = await self._load_submission(submission_id, for_update=True)

            status = MatchResultStatus(data.status)
            match_finalized = False
            if status == MatchResultStatus.approved and not match.is_completed:
                match_finalized = await self.matches.finalize_match(
                    match.id, submission.home_team_score, submission.away_team_score
                )

            await self.ledger.record_decision(submission, status, data.notes)
            self.audit.record(
                user_id=user_id,
                action="match_result.status_update",
                entity_type="match_result_submission",
                entity_id=submission_id,
                details={"status": status.value, "match_finalized": match_finalized},
            )

            if match_finalized:
                others = [
                    s
                    for s in await self.ledger.list_for_match(match.id)
                    if s.id != submission_id and s.status == MatchResultStatus.pending
                ]
                if others:
                    logger.info(
                        "Match %s finalized from submission %s; %d sibling "
                        "submission(s) still pending manager review",
                        match.id,
                        submission_id,
                        len(others),
                    )

            updated = await self.ledger.get_read(submission_id)
        assert updated is not None
        return updated

    async def delete_submission(self, user_id: int, submission_id: int) -> bool:
        """Remove a submission; allowed for league managers and the submitter."""
        async with self.session.begin():
            submission = await self._load_submission(submission_id)
            match = await self._load_match(submission.match_id)
            is_manager = await self.membership.is_league_manager(user_id, match.league_id)
            if not is_manager and submission.user_id != user_id:
                raise ForbiddenError("Forbidden")

            if not await self.ledger.delete(submission_id):
                raise NotFoundError("Submission")
            self.audit.record(
                user_id=user_id,
                action="match_result.delete",
                entity_type="match_result_submission",
                entity_id=submission_id,
                details={"match_id": match.id, "team_id": submission.team_id},
            )
        return True

    async def list_submissions(
        self,
        user_id: int,
        match_id: int,
    ) -> list[MatchResultSubmissionRead]:
        """Submissions for a match, visible to both teams and managers."""
        async with self.session.begin():
            match = await self._load_match(match_id)
            if not await can_view_match_results(self.membership, user_id, match):
                raise ForbiddenError("Forbidden")
            return await self.ledger.list_for_match(match_id)

    async def get_submission(
        self,
        user_id: int,
        submission_id: int,
    ) -> MatchResultSubmissionRead:
        async with self.session.begin():
            submission = await self.ledger.get_read(submission_id)
            if submission is None:
                raise NotFoundError("Submission")
            match = await self._load_match(submission.match_id)
            if not await can_view_match_results(self.membership, user_id, match):
                raise ForbiddenError("Forbidden")
            return submission
