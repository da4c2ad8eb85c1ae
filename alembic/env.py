"""Alembic environment — runs ledger migrations on the async engine.

Design Decisions:
    - The URL comes from crowdledger.config.Settings (DATABASE_URL, with the
      postgresql:// -> postgresql+asyncpg:// rewrite), never from alembic.ini
    - Offline mode (alembic upgrade --sql) emits the DDL and the counter seed
      for DBAs who apply schema changes by hand
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import crowdledger.models  # noqa: F401
from crowdledger.config import get_settings
from crowdledger.db.base import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata, compare_type=True, **kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda conn: _configure(connection=conn))
    await engine.dispose()


database_url = get_settings().database_url
if context.is_offline_mode():
    _configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_migrate_online(database_url))
