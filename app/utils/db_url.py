"""Database URL normalization shared by the app engine and Alembic."""

import ssl
from typing import Any, Dict, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


def _normalize_db_url(url: str) -> str:
    """Select an async driver for bare Postgres URLs.

    "postgres://" and "postgresql://" become "postgresql+asyncpg://". URLs that
    already name a driver (postgresql+psycopg, sqlite+aiosqlite) pass through.
    """
    try:
        u = make_url(url)
    except ArgumentError:
        if url.startswith("postgresql://"):
            return "postgresql+asyncpg://" + url.split("://", 1)[1]
        if url.startswith("postgres://"):
            return "postgresql+asyncpg://" + url.split("://", 1)[1]
        return url

    driver = (u.drivername or "").lower()
    if driver in ("postgres", "postgresql"):
        u = u.set(drivername="postgresql+asyncpg")
    return u.render_as_string(hide_password=False)


def _ssl_connect_args(sslmode: str) -> Dict[str, Any]:
    mode = sslmode.lower()
    if mode == "disable":
        return {"ssl": False}
    if mode in {"allow", "prefer"}:
        # asyncpg negotiates TLS on its own when the server asks for it
        return {}
    if mode == "require":
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        return {"ssl": ssl_context}
    if mode == "verify-ca":
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        return {"ssl": ssl_context}
    return {"ssl": ssl.create_default_context()}


def prepare_connection(url: str) -> Tuple[str, Dict[str, Any]]:
    """Return (url, connect_args) suitable for create_async_engine.

    asyncpg rejects libpq-only query args (sslmode, channel_binding), so they
    are stripped from the URL and translated into connect kwargs.
    """
    normalized_url = _normalize_db_url(url)
    if not normalized_url.startswith("postgresql+asyncpg://"):
        return normalized_url, {}

    split = urlsplit(normalized_url)
    sslmode = None
    filtered_pairs = []
    for key, value in parse_qsl(split.query, keep_blank_values=True):
        if key == "sslmode":
            sslmode = value
        elif key != "channel_binding":
            filtered_pairs.append((key, value))

    cleaned_query = urlencode(filtered_pairs, doseq=True)
    cleaned_url = urlunsplit(split._replace(query=cleaned_query)).rstrip("?")
    connect_args = _ssl_connect_args(sslmode) if sslmode else {}
    return cleaned_url, connect_args


def describe_database_url(url: str) -> str:
    """Return a sanitized, human-readable description of the DB URL for logging.

    Example: "postgresql+asyncpg://user@host:5432/dbname"
    Passwords are never included.
    """
    try:
        u = make_url(url)
    except ArgumentError:
        return "<unparseable database URL>"
    auth = u.username or "?"
    host = u.host or "?"
    port = f":{u.port}" if u.port else ""
    db = u.database or "?"
    return f"{u.drivername}://{auth}@{host}{port}/{db}"
