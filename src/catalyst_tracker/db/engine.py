"""AsyncEngine + session factory.

PostgreSQL (asyncpg) in deployment. A ``sqlite+aiosqlite`` URL is accepted for
local runs and the integration tests; it skips the server pool settings.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from catalyst_tracker.db.models import Base

SQLITE_BUSY_TIMEOUT = 30


def create_db_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_recycle: int = 1800,
    pool_timeout: int = 30,
    echo: bool = False,
) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return create_async_engine(
            url, echo=echo, connect_args={"timeout": SQLITE_BUSY_TIMEOUT}
        )
    return create_async_engine(
        url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=pool_recycle,
        pool_timeout=pool_timeout,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables from the ORM metadata. PostgreSQL uses Alembic instead."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
