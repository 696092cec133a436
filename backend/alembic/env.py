"""
Alembic Migration Environment
===============================

What:  Applies the pets schema to the configured store.
How:   The URL comes from DATABASE_URL through adoptme.config, unless one is
       given on the command line:

           alembic upgrade head
           alembic -x database_url=sqlite+aiosqlite:///./adoptme.db upgrade head

       Online runs use a throwaway async engine without pooling and hand its
       connection to Alembic through run_sync().
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from adoptme.config import settings
from adoptme.database import Base
import adoptme.models  # noqa: F401  (fills Base.metadata)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("database_url") or settings.database_url


def configure(**options) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        **options,
    )


def run_migrations_offline() -> None:
    """Print the migration SQL instead of executing it."""
    configure(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    # SQLite cannot ALTER most columns in place
    configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(database_url(), poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
