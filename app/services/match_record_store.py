"""Read and finalize match records for the reconciliation engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.schemas.matches import Match, MatchStatus
from app.schemas.teams import Team


@dataclass(frozen=True)
class MatchDetails:
    """The slice of a match the results engine needs."""

    id: int
    league_id: int
    home_team_id: int
    away_team_id: int
    home_team_name: str
    away_team_name: str
    status: MatchStatus

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.completed


class MatchRecordStore(Protocol):
    async def get_match_details(
        self, match_id: int, *, for_update: bool = False
    ) -> Optional[MatchDetails]: ...

    async def finalize_match(
        self, match_id: int, home_team_score: int, away_team_score: int
    ) -> bool: ...


class SqlMatchRecordStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_match_details(
        self,
        match_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[MatchDetails]:
        """Load a match with both team names.

        With ``for_update`` the match row (not the team rows) is locked until
        the surrounding transaction ends, which serializes concurrent
        submissions for the same match.
        """
        home_team = aliased(Team)
        away_team = aliased(Team)
        stmt = (
            select(
                Match.id,
                Match.league_id,
                Match.home_team_id,
                Match.away_team_id,
                Match.status,
                home_team.name.label("home_team_name"),  # type: ignore[attr-defined]
                away_team.name.label("away_team_name"),  # type: ignore[attr-defined]
            )  # type: ignore[call-overload]
            .join(home_team, home_team.id == Match.home_team_id)
            .join(away_team, away_team.id == Match.away_team_id)
            .where(Match.id == match_id)
        )
        if for_update:
            stmt = stmt.with_for_update(of=Match.__table__)  # type: ignore[attr-defined]

        row = (await self.session.execute(stmt)).mappings().first()
        if row is None:
            return None
        return MatchDetails(
            id=row["id"],
            league_id=row["league_id"],
            home_team_id=row["home_team_id"],
            away_team_id=row["away_team_id"],
            home_team_name=row["home_team_name"],
            away_team_name=row["away_team_name"],
            status=MatchStatus(row["status"]),
        )

    async def finalize_match(
        self,
        match_id: int,
        home_team_score: int,
        away_team_score: int,
    ) -> bool:
        """Write the final score and mark the match completed.

        The status guard is part of the UPDATE itself, so a match that was
        completed by a concurrent transaction is left alone. Returns False in
        that case.
        """
        result = await self.session.execute(
            update(Match)
            .where(
                Match.id == match_id,  # type: ignore[arg-type]
                Match.status != MatchStatus.completed,  # type: ignore[arg-type]
            )
            .values(
                home_team_score=home_team_score,
                away_team_score=away_team_score,
                status=MatchStatus.completed,
                updated_at=datetime.now(UTC).replace(tzinfo=None),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
