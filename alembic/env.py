"""Alembic environment for the library database.

Usage:
  alembic upgrade head
  alembic revision --autogenerate -m "..."
"""
from __future__ import annotations

from logging.config import fileConfig
from alembic import context
from sqlalchemy import create_engine, pool

from library_data.config import settings
from library_data.database import Base

# Import all models to ensure they're registered with Base.metadata
from library_data import models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def get_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.database_url


def run_migrations_offline() -> None:
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = get_url()
    # 不挂 foreign_keys 监听：批量模式重建表时 DROP 旧表会触发 ON DELETE CASCADE
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=True,  # SQLite批量模式
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
