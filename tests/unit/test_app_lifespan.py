"""Unit tests for application startup and shutdown."""

import pytest

from app import main
from app.config import settings


@pytest.fixture()
def db_calls(monkeypatch):
    calls: list[str] = []

    async def fake_init_db():
        calls.append("init")

    async def fake_dispose():
        calls.append("dispose")

    monkeypatch.setattr(main, "init_db", fake_init_db)
    monkeypatch.setattr(main, "dispose_engine", fake_dispose)
    return calls


@pytest.mark.asyncio
async def test_dev_startup_creates_tables(monkeypatch, db_calls):
    """Hosting-platform variables do not affect table creation."""
    monkeypatch.setenv("FLY_APP_NAME", "league-results")
    monkeypatch.setattr(settings, "env", "dev")
    monkeypatch.setattr(settings, "auto_init_db", True)

    async with main.lifespan(main.app):
        assert db_calls == ["init"]

    assert db_calls == ["init", "dispose"]


@pytest.mark.asyncio
async def test_startup_skips_tables_when_disabled(monkeypatch, db_calls):
    monkeypatch.setattr(settings, "env", "prod")
    monkeypatch.setattr(settings, "debug", False)
    monkeypatch.setattr(settings, "auto_init_db", True)

    async with main.lifespan(main.app):
        pass

    assert db_calls == ["dispose"]
