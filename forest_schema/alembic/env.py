"""Alembic environment for the forest schema (synchronous engine)."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from forest_schema.config import DatabaseConfig
from forest_schema.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# run_migrations.alembic_config supplies the URL; a bare `alembic` call reads DATABASE_URL / DB_*
if not config.attributes.get("url_configured"):
    config.set_main_option(
        "sqlalchemy.url",
        DatabaseConfig.from_env().url.render_as_string(hide_password=False).replace("%", "%%"),
    )

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
