"""Audit trail writes for manager decisions."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.audit_logs import AuditLog


class AuditTrail:
    """Adds audit rows to the caller's transaction.

    Rows commit or roll back together with the change they describe.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def record(
        self,
        *,
        user_id: Optional[int],
        action: str,
        entity_type: str,
        entity_id: int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.session.add(
            AuditLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
            )
        )
