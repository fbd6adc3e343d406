"""Decide in which capacity a user may act on a match."""

from __future__ import annotations

from enum import Enum

from app.services.match_record_store import MatchDetails
from app.services.membership_service import MembershipOracle


class SubmitterRole(str, Enum):
    home_team = "home_team"
    away_team = "away_team"
    league_manager = "league_manager"
    none = "none"

    @property
    def is_team(self) -> bool:
        return self in (SubmitterRole.home_team, SubmitterRole.away_team)


async def resolve_submitter_role(
    oracle: MembershipOracle,
    user_id: int,
    match: MatchDetails,
) -> SubmitterRole:
    """Resolve the caller's role, checked in priority order.

    Home membership wins over away membership, and team membership wins over
    league management: a manager who also plays submits for their team.
    Evaluated fresh on every call.
    """
    if await oracle.is_team_member(user_id, match.home_team_id):
        return SubmitterRole.home_team
    if await oracle.is_team_member(user_id, match.away_team_id):
        return SubmitterRole.away_team
    if await oracle.is_league_manager(user_id, match.league_id):
        return SubmitterRole.league_manager
    return SubmitterRole.none


def team_for_role(role: SubmitterRole, match: MatchDetails) -> int:
    """The team a team-submitter acts for."""
    if role == SubmitterRole.home_team:
        return match.home_team_id
    if role == SubmitterRole.away_team:
        return match.away_team_id
    raise ValueError(f"{role.value} does not submit for a team")


async def can_view_match_results(
    oracle: MembershipOracle,
    user_id: int,
    match: MatchDetails,
) -> bool:
    """Members of either team and league managers may read submissions."""
    return await resolve_submitter_role(oracle, user_id, match) != SubmitterRole.none
