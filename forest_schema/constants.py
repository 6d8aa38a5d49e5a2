"""Database requirements and constants for the forest schema.

This module defines the minimum requirements that any PostgreSQL instance
must meet to host the state forest tables, plus engine defaults shared by
the database manager and the bootstrap scripts.
"""

# Database version requirements
DATABASE_REQUIREMENTS = {
    "min_postgresql_version": "12.0",
}

# Version compatibility matrix
VERSION_COMPATIBILITY = {
    "0.1.x": {
        "postgresql": "12.0+",
        "sqlalchemy": "2.0+",
        "pydantic": "2.0+",
        "alembic": "1.12+",
    }
}

# Drivers the database manager knows how to configure
SUPPORTED_DRIVERS = (
    "postgresql",
    "postgresql+psycopg2",
    "postgresql+asyncpg",
    "sqlite",
    "sqlite+pysqlite",
)

DEFAULT_DRIVER = "postgresql+psycopg2"

# Connection pool settings
CONNECTION_POOL_DEFAULTS = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 30,
    "pool_recycle": 3600,
}

# Constraint naming convention used by the metadata and by Alembic
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Abbreviations are always two letters (e.g. "AL")
STATE_ABBREVIATION_LENGTH = 2
