# Alembic driver, online and offline modes

from __future__ import annotations

from alembic import context
from sqlalchemy import engine_from_config, pool
from logging.config import fileConfig
import logging

from stylist.core.config import settings
from stylist.db.base import Base
import stylist.db.model  # registers every model on Base.metadata



config = context.config


# Settings win over the ini connection string
if settings.DATABASE_URL:
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


# use the ini logging section when present, else basicConfig
try:
    if config.config_file_name:
        fileConfig(config.config_file_name)
    else:
        logging.basicConfig(level=logging.INFO)
except KeyError:
    logging.basicConfig(level=logging.INFO)


target_metadata = Base.metadata


# embedding_vector is managed by hand (pgvector), keep autogenerate from dropping it
def include_object(object, name, type_, reflected, compare_to):
    if type_ == "column" and name == "embedding_vector":
        return False
    if type_ == "index" and name == "products_embedding_vector_hnsw_idx":
        return False
    return True


"""Emit SQL without a database connection (offline mode)"""
def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


"""Run against a live connection (online mode)"""
def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
