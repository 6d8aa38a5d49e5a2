"""Database validation utilities for the forest schema.

This module provides functions to validate that the PostgreSQL database
meets the minimum requirements specified in constants.py, and that a
database holds the forest tables.
"""
import re
import logging
from typing import Optional, List

import asyncpg
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from .constants import DATABASE_REQUIREMENTS
from .models import Base

logger = logging.getLogger(__name__)


def parse_postgresql_version(version_string: str) -> Optional[float]:
    """Parse PostgreSQL version from version() output.

    Args:
        version_string: Output from SELECT version()

    Returns:
        Float version number (e.g., 16.1 -> 16.1) or None if parsing fails
    """
    # Example: "PostgreSQL 16.1 on x86_64-pc-linux-gnu, compiled by..."
    match = re.search(r'PostgreSQL (\d+(?:\.\d+)?)', version_string)
    if match:
        return float(match.group(1))
    return None


def _check_version(version_string: str) -> float:
    version = parse_postgresql_version(version_string)

    if version is None:
        logger.warning(f"Could not parse PostgreSQL version from: {version_string}")
        raise RuntimeError("Unable to determine PostgreSQL version")

    min_version = float(DATABASE_REQUIREMENTS["min_postgresql_version"])
    if version < min_version:
        raise RuntimeError(
            f"PostgreSQL {min_version}+ required, but found {version}. "
            f"Please upgrade your PostgreSQL installation."
        )

    logger.info(f"PostgreSQL version {version} meets requirement (>= {min_version})")
    return version


async def validate_postgresql_version_async(connection: asyncpg.Connection) -> float:
    """Validate PostgreSQL version meets minimum requirements (async).

    Args:
        connection: AsyncPG database connection

    Returns:
        The server version

    Raises:
        RuntimeError: If version is below minimum requirement
    """
    version_string = await connection.fetchval("SELECT version()")
    return _check_version(version_string)


def validate_postgresql_version_sync(connection) -> float:
    """Validate PostgreSQL version meets minimum requirements (sync).

    Args:
        connection: Psycopg2 database connection

    Returns:
        The server version

    Raises:
        RuntimeError: If version is below minimum requirement
    """
    cursor = connection.cursor()
    try:
        cursor.execute("SELECT version()")
        version_string = cursor.fetchone()[0]
    finally:
        cursor.close()
    return _check_version(version_string)


async def validate_database_compatibility_async(connection: asyncpg.Connection) -> None:
    """Perform full database compatibility validation (async).

    Raises:
        RuntimeError: If any requirement is not met
    """
    logger.info("Validating database compatibility...")
    await validate_postgresql_version_async(connection)
    logger.info("Database compatibility validation passed")


def validate_database_compatibility_sync(connection) -> None:
    """Perform full database compatibility validation (sync).

    Raises:
        RuntimeError: If any requirement is not met
    """
    logger.info("Validating database compatibility...")
    validate_postgresql_version_sync(connection)
    logger.info("Database compatibility validation passed")


def missing_tables(engine: Engine) -> List[str]:
    """Return the forest tables that do not exist in the database."""
    existing = set(inspect(engine).get_table_names())
    return [
        table.name for table in Base.metadata.sorted_tables
        if table.name not in existing
    ]
