"""Tests for the submission ledger against SQLite."""

from __future__ import annotations

from datetime import datetime

import pytest
import pytest_asyncio

from app.schemas.match_result_submissions import (
    MatchResultStatus,
    MatchResultSubmission,
)
from app.services.errors import DuplicateSubmissionError
from app.services.submission_ledger import SqlSubmissionLedger
from tests.league_helpers import LeagueFixture, count_rows, fetch_all, seed_league


@pytest_asyncio.fixture()
async def league(db_session) -> LeagueFixture:
    return await seed_league(db_session)


def _row(league: LeagueFixture, user_id: int, home: int, away: int) -> MatchResultSubmission:
    return MatchResultSubmission(
        match_id=league.match_id,
        team_id=league.home_team_id,
        user_id=user_id,
        home_team_score=home,
        away_team_score=away,
    )


async def _insert(session_factory, submission: MatchResultSubmission) -> None:
    async with session_factory() as session:
        async with session.begin():
            await SqlSubmissionLedger(session).insert(submission)


class TestInsert:
    """Tests for SqlSubmissionLedger.insert."""

    @pytest.mark.asyncio
    async def test_insert_stores_timestamps(self, session_factory, league):
        """Default timestamps are accepted by the installed SQLModel."""
        await _insert(session_factory, _row(league, league.home_captain_id, 2, 1))

        rows = await fetch_all(session_factory, MatchResultSubmission)
        assert len(rows) == 1
        assert rows[0].status == MatchResultStatus.pending
        assert isinstance(rows[0].created_at, datetime)
        assert isinstance(rows[0].updated_at, datetime)

    @pytest.mark.asyncio
    async def test_status_update_writes_timestamp(self, session_factory, league):
        await _insert(session_factory, _row(league, league.home_captain_id, 2, 1))
        [row] = await fetch_all(session_factory, MatchResultSubmission)

        async with session_factory() as session:
            async with session.begin():
                await SqlSubmissionLedger(session).set_status(
                    [row.id], MatchResultStatus.approved
                )

        [updated] = await fetch_all(session_factory, MatchResultSubmission)
        assert updated.status == MatchResultStatus.approved
        assert updated.updated_at >= row.updated_at

    @pytest.mark.asyncio
    async def test_unique_constraint_rejects_second_team_row(self, session_factory, league):
        """Without any match lock, the constraint alone stops a second row."""
        await _insert(session_factory, _row(league, league.home_captain_id, 2, 1))

        with pytest.raises(DuplicateSubmissionError):
            await _insert(session_factory, _row(league, league.home_player_id, 0, 0))

        rows = await fetch_all(session_factory, MatchResultSubmission)
        assert len(rows) == 1
        assert rows[0].user_id == league.home_captain_id

    @pytest.mark.asyncio
    async def test_duplicate_rolls_back_whole_transaction(self, session_factory, league):
        """Rows added before the failed insert are discarded with it."""
        await _insert(session_factory, _row(league, league.home_captain_id, 2, 1))

        async with session_factory() as session:
            with pytest.raises(DuplicateSubmissionError):
                async with session.begin():
                    ledger = SqlSubmissionLedger(session)
                    away = _row(league, league.away_captain_id, 2, 1)
                    away.team_id = league.away_team_id
                    await ledger.insert(away)
                    await ledger.insert(_row(league, league.home_player_id, 0, 0))

        assert await count_rows(session_factory, MatchResultSubmission) == 1


class TestGet:
    """Tests for SqlSubmissionLedger.get."""

    @pytest.mark.asyncio
    async def test_locked_read_refreshes_loaded_row(self, session_factory, league):
        await _insert(session_factory, _row(league, league.home_captain_id, 2, 1))
        [row] = await fetch_all(session_factory, MatchResultSubmission)

        async with session_factory() as session:
            async with session.begin():
                ledger = SqlSubmissionLedger(session)
                loaded = await ledger.get(row.id)
                assert loaded is not None
                await ledger.delete(row.id)

                assert await ledger.get(row.id, for_update=True) is None
