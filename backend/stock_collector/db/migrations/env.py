"""
Alembic migration environment — reads the database URL from collector settings.

Uses a SYNC engine for migrations (psycopg2) even though the collector
uses async (asyncpg) at runtime.  Every table lives in the invrpt
schema, and so does the alembic version table.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool, text

from stock_collector.core.config import settings
from stock_collector.db.models import Base
from stock_collector.db.models.base import INVRPT_SCHEMA

config = context.config

sync_url = settings.DATABASE_URL_SYNC
config.set_main_option("sqlalchemy.url", sync_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def include_name(name, type_, parent_names) -> bool:
    """Only look at the invrpt schema; other services own the rest."""
    if type_ == "schema":
        return name == INVRPT_SCHEMA
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=True,
        include_name=include_name,
        version_table_schema=INVRPT_SCHEMA,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with sync engine."""
    connectable = create_engine(sync_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        connection.execute(text(f"CREATE SCHEMA IF NOT EXISTS {INVRPT_SCHEMA}"))
        connection.commit()
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=True,
            include_name=include_name,
            version_table_schema=INVRPT_SCHEMA,
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
