"""Match result submission API routes.

Provides endpoints for:
- Reporting a match score (team members or league managers)
- Listing and viewing submissions for a match
- Manager decisions on individual submissions
- Removing a submission
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.match_results import (
    MatchResultSubmissionCreate,
    MatchResultSubmissionRead,
    MatchResultSubmissionUpdate,
    MessageResponse,
    SubmitMatchResultResponse,
)
from app.schemas.users import User
from app.services.reconciliation_engine import ReconciliationEngine
from app.services.user_authz import get_current_user
from app.utils.db_async import get_session

router = APIRouter(prefix="/api/match-results", tags=["match-results"])


def get_reconciliation_engine(
    db: AsyncSession = Depends(get_session),
) -> ReconciliationEngine:
    """Per-request engine bound to the request's session."""
    return ReconciliationEngine.for_session(db)


@router.get("/match/{match_id}", response_model=list[MatchResultSubmissionRead])
async def list_match_submissions(
    match_id: int,
    user: User = Depends(get_current_user),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> list[MatchResultSubmissionRead]:
    """List both teams' submissions for a match."""
    assert user.id is not None
    return await engine.list_submissions(user.id, match_id)


@router.get("/{submission_id}", response_model=MatchResultSubmissionRead)
async def get_submission(
    submission_id: int,
    user: User = Depends(get_current_user),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> MatchResultSubmissionRead:
    assert user.id is not None
    return await engine.get_submission(user.id, submission_id)


@router.post("", response_model=SubmitMatchResultResponse)
async def submit_match_result(
    payload: MatchResultSubmissionCreate,
    user: User = Depends(get_current_user),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> SubmitMatchResultResponse:
    """Report a score for a match.

    Team members create a pending submission that is reconciled against the
    opposing team's. League managers outside both teams finalize the match
    directly.
    """
    assert user.id is not None
    return await engine.submit(user.id, payload)


@router.patch("/{submission_id}", response_model=MatchResultSubmissionRead)
async def update_submission_status(
    submission_id: int,
    payload: MatchResultSubmissionUpdate,
    user: User = Depends(get_current_user),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> MatchResultSubmissionRead:
    """Approve or reject a submission (league managers only)."""
    assert user.id is not None
    return await engine.update_submission_status(user.id, submission_id, payload)


@router.delete("/{submission_id}", response_model=MessageResponse)
async def delete_submission(
    submission_id: int,
    user: User = Depends(get_current_user),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine),
) -> MessageResponse:
    assert user.id is not None
    await engine.delete_submission(user.id, submission_id)
    return MessageResponse(message="Match result submission deleted successfully")
