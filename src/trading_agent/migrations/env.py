"""Alembic environment for the ledger schema.

The database URL comes from the agent's own config (config.yaml named by
TRADING_CONFIG, then TRADING_DATABASE_URL), falling back to alembic.ini.
Only tables in the ledger schema are compared during autogenerate.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.schema import CreateSchema

from trading_agent.config.loader import load_config
from trading_agent.db.base import Base
from trading_agent.db.engine import database_url
from trading_agent.db.tables.ledger import SCHEMA

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def resolve_url() -> str:
    if os.environ.get("TRADING_CONFIG") or os.environ.get("TRADING_DATABASE_URL"):
        url = load_config(os.environ.get("TRADING_CONFIG")).database.url
    else:
        url = config.get_main_option("sqlalchemy.url")
    return database_url(url)


def only_ledger_tables(obj, name, type_, reflected, compare_to) -> bool:
    return type_ != "table" or obj.schema == SCHEMA


def run_migrations_offline() -> None:
    context.configure(
        url=resolve_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=True,
        include_object=only_ledger_tables,
        version_table_schema=SCHEMA,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(resolve_url(), poolclass=pool.NullPool)

    with engine.connect() as connection:
        # The version table lives in the ledger schema, so it must exist first
        connection.execute(CreateSchema(SCHEMA, if_not_exists=True))
        connection.commit()

        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=True,
            include_object=only_ledger_tables,
            version_table_schema=SCHEMA,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
