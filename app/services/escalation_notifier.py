"""Fan-out of score conflicts to league managers."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.match_results import ConflictResponse
from app.schemas.notifications import EmailOutbox, Notification, NotificationType
from app.schemas.users import User
from app.services.match_record_store import MatchDetails
from app.services.score_reconciliation import build_conflict_message

logger = logging.getLogger(__name__)

CONFLICT_NOTIFICATION_TITLE = "Match Result Conflict"


class EscalationNotifier(Protocol):
    async def notify_conflict(
        self,
        manager_user_id: int,
        match: MatchDetails,
        conflict: ConflictResponse,
    ) -> None: ...


class NotificationEscalationNotifier:
    """Writes an in-app notification (and optionally an outbox email).

    Rows are added to the caller's transaction; delivery of queued emails is
    the email worker's job.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        email_enabled: Optional[bool] = None,
    ) -> None:
        self.session = session
        self.email_enabled = (
            settings.conflict_email_enabled if email_enabled is None else email_enabled
        )

    async def notify_conflict(
        self,
        manager_user_id: int,
        match: MatchDetails,
        conflict: ConflictResponse,
    ) -> None:
        body = build_conflict_message(
            match.home_team_name, match.away_team_name, conflict
        )
        self.session.add(
            Notification(
                user_id=manager_user_id,
                title=CONFLICT_NOTIFICATION_TITLE,
                body=body,
                type=NotificationType.match_result,
                action_id=match.id,
            )
        )

        if not self.email_enabled:
            return

        email = await self.session.scalar(
            select(User.email).where(User.id == manager_user_id)  # type: ignore[arg-type]
        )
        if not email:
            logger.warning(
                "No email on file for manager %s; skipping conflict email",
                manager_user_id,
            )
            return

        review_url = f"{settings.app_base_url.rstrip('/')}/matches/{match.id}/results"
        self.session.add(
            EmailOutbox(
                to_email=email,
                subject=f"{CONFLICT_NOTIFICATION_TITLE}: "
                f"{match.home_team_name} vs {match.away_team_name}",
                body=f"{body}\n\nReview the submissions: {review_url}\n",
            )
        )
