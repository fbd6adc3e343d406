"""Async SQLAlchemy engine and session helpers."""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.config import settings
from app.utils.db_url import prepare_connection

DATABASE_URL, CONNECT_ARGS = prepare_connection(settings.database_url)

engine = create_async_engine(
    DATABASE_URL,
    echo=settings.sql_echo,
    pool_pre_ping=True,
    connect_args=CONNECT_ARGS,
)
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with SessionLocal() as session:
        yield session


def import_table_modules() -> None:
    """Import every table module so SQLModel.metadata is complete."""
    from app.schemas import (  # noqa: F401
        audit_logs,
        leagues,
        match_result_submissions,
        matches,
        notifications,
        teams,
        users,
    )


async def init_db():
    """Initialize the database (create tables)."""
    import_table_modules()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose of the async engine and its connection pool."""
    await engine.dispose()
