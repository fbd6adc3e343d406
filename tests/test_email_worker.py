"""Tests for draining the email outbox through the Resend API."""

from __future__ import annotations

import json

import httpx
import pytest

from app.config import settings
from app.schemas.notifications import EmailOutbox
from app.services.email_worker import RESEND_EMAILS_URL, send_pending_emails
from tests.league_helpers import fetch_all


async def _queue(session_factory, *recipients: str) -> None:
    async with session_factory() as session:
        session.add_all(
            EmailOutbox(to_email=to, subject="Match Result Conflict", body="Please review")
            for to in recipients
        )
        await session.commit()


@pytest.mark.asyncio
async def test_sends_and_marks_emails(monkeypatch, session_factory):
    monkeypatch.setattr(settings, "resend_api_key", "re_test")
    await _queue(session_factory, "a@example.com", "b@example.com")
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == RESEND_EMAILS_URL
        assert request.headers["Authorization"] == "Bearer re_test"
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "email_123"})

    async with session_factory() as session:
        sent = await send_pending_emails(session, transport=httpx.MockTransport(handler))

    assert sent == 2
    assert [payload["to"] for payload in seen] == [["a@example.com"], ["b@example.com"]]
    rows = await fetch_all(session_factory, EmailOutbox)
    assert all(row.sent_at is not None for row in rows)
    assert {row.provider for row in rows} == {"resend"}


@pytest.mark.asyncio
async def test_failed_sends_stay_queued(monkeypatch, session_factory):
    monkeypatch.setattr(settings, "resend_api_key", "re_test")
    await _queue(session_factory, "ok@example.com", "bounce@example.com")

    def handler(request: httpx.Request) -> httpx.Response:
        if json.loads(request.content)["to"] == ["bounce@example.com"]:
            return httpx.Response(422, json={"message": "invalid recipient"})
        return httpx.Response(200, json={"id": "email_123"})

    async with session_factory() as session:
        sent = await send_pending_emails(session, transport=httpx.MockTransport(handler))

    assert sent == 1
    rows = {row.to_email: row for row in await fetch_all(session_factory, EmailOutbox)}
    assert rows["ok@example.com"].sent_at is not None
    assert rows["bounce@example.com"].sent_at is None


@pytest.mark.asyncio
async def test_missing_api_key_leaves_outbox_untouched(monkeypatch, session_factory):
    monkeypatch.setattr(settings, "resend_api_key", None)
    await _queue(session_factory, "a@example.com")

    async with session_factory() as session:
        sent = await send_pending_emails(session)

    assert sent == 0
    rows = await fetch_all(session_factory, EmailOutbox)
    assert rows[0].sent_at is None


@pytest.mark.asyncio
async def test_batch_size_limits_sends(monkeypatch, session_factory):
    monkeypatch.setattr(settings, "resend_api_key", "re_test")
    await _queue(session_factory, "a@example.com", "b@example.com", "c@example.com")

    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    async with session_factory() as session:
        sent = await send_pending_emails(session, batch_size=2, transport=transport)

    assert sent == 2
    rows = await fetch_all(session_factory, EmailOutbox)
    assert sum(row.sent_at is None for row in rows) == 1
