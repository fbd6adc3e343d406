"""Unit tests for the outbox cron runner."""

import pytest

from app.cli import send_emails


def test_parse_args_defaults():
    assert send_emails.parse_args([]).batch_size == 50
    assert send_emails.parse_args(["--batch-size", "5"]).batch_size == 5


@pytest.mark.asyncio
async def test_main_reports_success(monkeypatch):
    calls = {}

    async def fake_send(db, *, batch_size):
        calls["batch_size"] = batch_size
        return 3

    async def fake_dispose():
        calls["disposed"] = True

    monkeypatch.setattr(send_emails, "send_pending_emails", fake_send)
    monkeypatch.setattr(send_emails, "dispose_engine", fake_dispose)

    assert await send_emails.main(7) == 0
    assert calls == {"batch_size": 7, "disposed": True}


@pytest.mark.asyncio
async def test_main_reports_failure(monkeypatch):
    async def failing_send(db, *, batch_size):
        raise RuntimeError("provider down")

    async def fake_dispose():
        return None

    monkeypatch.setattr(send_emails, "send_pending_emails", failing_send)
    monkeypatch.setattr(send_emails, "dispose_engine", fake_dispose)

    assert await send_emails.main(1) == 1
