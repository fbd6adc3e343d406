"""Caller identity for league API endpoints.

Authentication happens in the gateway in front of this service; it forwards
the authenticated user's id in a request header. This module only checks that
the id refers to a known user.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.schemas.users import User
from app.utils.db_async import get_session


def _parse_user_id(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    return user_id if user_id > 0 else None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the calling user from the forwarded id header (or raise 401)."""
    user_id = _parse_user_id(request.headers.get(settings.user_id_header))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    async with db.begin():
        result = await db.execute(
            select(User).where(User.id == user_id)  # type: ignore[arg-type]
        )
        user = result.scalar_one_or_none()
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
