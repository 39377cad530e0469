# -*- coding: utf-8 -*-
# vidshare/alembic/env.py: Alembic bootstrap
from __future__ import annotations

import logging
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Importing the package registers every mapper on Base.metadata
from vidshare.db import Base, DB_URL
import vidshare.models  # noqa: F401

log = logging.getLogger("alembic.env")

# -----------------------------------------------------------------------------
# Alembic config & DB URL discovery
# -----------------------------------------------------------------------------
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)  # logging config from alembic.ini

# Same URL the app uses (env var wins, then settings)
config.set_main_option("sqlalchemy.url", DB_URL.replace("%", "%%"))

target_metadata = Base.metadata

VERSION_TABLE = os.getenv("ALEMBIC_VERSION_TABLE", "alembic_version")


def include_object(object, name, type_, reflected, compare_to):
    """
    Skip objects that exist ONLY in the database (would be DROPs).

    Set ALEMBIC_ALLOW_DROPS=1 to allow autogenerate to propose DROPs.
    """
    allow_drops = os.getenv("ALEMBIC_ALLOW_DROPS", "0") in ("1", "true", "True")
    if not allow_drops and reflected and compare_to is None:
        return False
    return True


def process_revision_directives(context_, revision, directives):
    """Avoid creating empty migration files when nothing changed."""
    if not directives:
        return
    script = directives[0]
    if getattr(script, "upgrade_ops", None) and not script.upgrade_ops.is_empty():
        return
    log.info("No schema changes detected; skipping empty migration file.")
    directives[:] = []


def _common_config(url: str) -> dict:
    return dict(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=url.startswith("sqlite"),  # SQLite needs batch ALTERs
        process_revision_directives=process_revision_directives,
        version_table=VERSION_TABLE,
    )


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, literal_binds=True, **_common_config(url))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = config.get_main_option("sqlalchemy.url")
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_common_config(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
