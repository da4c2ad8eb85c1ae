"""Async Session Factory — engine + session factory for use outside FastAPI.

Invariants:
    - expire_on_commit=False, same as DatabaseSessionManager
    - create_schema() is for tests and local development; production schema
      comes from alembic migrations

Design Decisions:
    - Separate from infrastructure/database.py: test fixtures and scripts need a
      raw factory without the error-mapping wrapper
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from crowdledger.db.base import Base


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the given engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )


def create_engine_for_url(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo)


async def create_schema(engine: AsyncEngine) -> None:
    """Create every ledger table that does not exist yet and seed the id counter."""
    import crowdledger.models  # noqa: F401  (registers all tables on Base.metadata)
    from crowdledger.models.ledger_counter import seed_counter_statement

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(seed_counter_statement(conn.dialect.name))


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
