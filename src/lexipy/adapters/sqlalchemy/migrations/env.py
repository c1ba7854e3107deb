"""Alembic environment for the lexipy entry and snapshot tables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from lexipy.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from lexipy.config.storage import get_database_uri

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

start_mappers()


def _migrate(**options: object) -> None:
    context.configure(
        target_metadata=mapper_registry.metadata,
        render_as_batch=True,
        compare_type=True,
        **options,
    )
    with context.begin_transaction():
        context.run_migrations()


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_uri()


def _migrate_connection(connection: Connection) -> None:
    _migrate(connection=connection)


if context.is_offline_mode():
    _migrate(url=_database_url(), literal_binds=True)
elif (shared := config.attributes.get("connection")) is not None:
    _migrate_connection(shared)
else:
    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _migrate_connection(connection)
    finally:
        engine.dispose()
