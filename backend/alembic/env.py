# backend/alembic/env.py
from __future__ import annotations

import logging.config
import os

from alembic import context
from sqlalchemy import engine_from_config, pool

from mediaops.db.base import Base
import mediaops.db.models  # noqa: F401  registers tables on Base.metadata

config = context.config
if config.config_file_name is not None:
    logging.config.fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _normalize_db_url(url: str) -> str:
    """
    Bring hosted-Postgres style URLs to the psycopg(v3) driver SQLAlchemy expects.
    - postgres://...        -> postgresql+psycopg://...
    - postgresql://...      -> postgresql+psycopg://...
    """
    url = url.strip()
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://") :]
    return url


def get_url() -> str:
    url = (os.getenv("DATABASE_URL") or "").strip()
    if not url:
        url = (config.get_main_option("sqlalchemy.url") or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is required for alembic (set env DATABASE_URL).")
    return _normalize_db_url(url)


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section, {})  # type: ignore[arg-type]
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        future=True,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
