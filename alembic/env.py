"""
Alembic Migration Environment
=============================

What:  Applies schema migrations for the notebook store.
How:   The connection URL comes from notebook_api settings (DATABASE_URL),
       never from alembic.ini. Online runs reuse the application's own
       `Database` handle, so the same driver and engine options apply.
       SQLite databases are migrated in batch mode (ALTER TABLE emulation).
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from notebook_api.config import settings
from notebook_api.database import Base, Database
from notebook_api.models.notebook import Notebook  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

config.set_main_option("sqlalchemy.url", settings.database_url)

CONFIGURE_OPTS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    "render_as_batch": settings.is_sqlite,
}


def run_migrations_offline() -> None:
    """`alembic upgrade head --sql`: print the DDL instead of executing it."""
    context.configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection) -> None:
    context.configure(connection=connection, **CONFIGURE_OPTS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    database = Database(settings.database_url)
    try:
        async with database.engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await database.teardown()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
