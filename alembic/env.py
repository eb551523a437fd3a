"""
============================================================
TARJETA CRC — alembic/env.py (Runtime de migraciones)
============================================================
Responsabilidades:
  - Resolver la URL de la base: DATABASE_URL del entorno o, si falta,
    sqlalchemy.url de alembic.ini.
  - Ejecutar las revisiones online (engine sin pool) u offline (SQL).

Colaboradores:
  - alembic.context
  - SQLAlchemy (engine_from_config, driver psycopg)

Política:
  - Sin ORM: target_metadata = None, sin autogenerate.
============================================================
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

_DRIVER_PREFIXES = ("postgresql://", "postgres://")


def database_url() -> str:
    """URL SQLAlchemy con driver psycopg a partir de la URL libpq de la app."""
    raw = os.environ.get("DATABASE_URL") or config.get_main_option("sqlalchemy.url") or ""
    for prefix in _DRIVER_PREFIXES:
        if raw.startswith(prefix):
            return "postgresql+psycopg://" + raw[len(prefix):]
    return raw


def run() -> None:
    if context.is_offline_mode():
        context.configure(
            url=database_url(),
            target_metadata=None,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
        with context.begin_transaction():
            context.run_migrations()
        return

    section = dict(config.get_section(config.config_ini_section) or {})
    section["sqlalchemy.url"] = database_url()
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=None)
        with context.begin_transaction():
            context.run_migrations()


run()
