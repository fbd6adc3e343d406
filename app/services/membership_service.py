"""Team and league membership lookups used for result submission rights."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.leagues import LeagueMember, LeagueMemberRole
from app.schemas.teams import TeamMember, TeamStatus
from app.schemas.users import User, UserRole


class MembershipOracle(Protocol):
    async def is_team_member(self, user_id: int, team_id: int) -> bool: ...

    async def is_league_manager(self, user_id: int, league_id: int) -> bool: ...

    async def list_league_managers(self, league_id: int) -> list[int]: ...


class SqlMembershipOracle:
    """Membership answers read straight from the roster tables.

    Nothing is cached: rosters change between requests and every check must
    see the current state. Callers own the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def is_team_member(self, user_id: int, team_id: int) -> bool:
        """True if the user has an active roster entry on the team."""
        result = await self.session.execute(
            select(TeamMember.id).where(
                TeamMember.user_id == user_id,  # type: ignore[arg-type]
                TeamMember.team_id == team_id,  # type: ignore[arg-type]
                TeamMember.status == TeamStatus.active,  # type: ignore[arg-type]
            )
        )
        return result.first() is not None

    async def is_league_manager(self, user_id: int, league_id: int) -> bool:
        """True for league managers and for global admins."""
        role = await self.session.scalar(
            select(User.role).where(User.id == user_id)  # type: ignore[arg-type]
        )
        if role == UserRole.admin:
            return True

        result = await self.session.execute(
            select(LeagueMember.id).where(
                LeagueMember.user_id == user_id,  # type: ignore[arg-type]
                LeagueMember.league_id == league_id,  # type: ignore[arg-type]
                LeagueMember.role == LeagueMemberRole.manager,  # type: ignore[arg-type]
            )
        )
        return result.first() is not None

    async def list_league_managers(self, league_id: int) -> list[int]:
        """User ids explicitly assigned as managers of the league.

        Global admins are not listed; they act as managers but are not on the
        escalation roster.
        """
        result = await self.session.execute(
            select(LeagueMember.user_id)
            .where(
                LeagueMember.league_id == league_id,  # type: ignore[arg-type]
                LeagueMember.role == LeagueMemberRole.manager,  # type: ignore[arg-type]
            )
            .order_by(LeagueMember.user_id)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
