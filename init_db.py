#!/usr/bin/env python3
"""Initialize the forest database with schema and sample data.

This script:
1. Creates the database if it doesn't exist
2. Validates the PostgreSQL server version
3. Runs all migrations
4. Optionally loads sample data for development
"""

import asyncio
import sys
import argparse
import logging

from dotenv import load_dotenv
import asyncpg

from forest_schema.config import DatabaseConfig
from forest_schema.database import DatabaseManager
from forest_schema.schemas import ForeignKeyPolicy
from forest_schema.seed import load_sample_data
from forest_schema.validators import validate_database_compatibility_async
from run_migrations import resolve_database_url, run_alembic_migrations

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def _asyncpg_dsn(config: DatabaseConfig, database: str) -> str:
    # asyncpg wants a plain postgresql:// DSN
    url = config.with_driver("postgresql").url.set(database=database)
    return url.render_as_string(hide_password=False)


async def create_database_if_not_exists(config: DatabaseConfig) -> bool:
    """Create database if it doesn't exist.

    Args:
        config: Connection configuration of the target database

    Returns:
        bool: True if database was created, False if already existed
    """
    db_name = config.database

    try:
        # Connect to postgres database to create our database
        conn = await asyncpg.connect(_asyncpg_dsn(config, "postgres"))
        try:
            exists = await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM pg_database WHERE datname = $1)",
                db_name
            )

            if not exists:
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info(f"Created database: {db_name}")
                return True

            logger.info(f"Database already exists: {db_name}")
            return False
        finally:
            await conn.close()

    except Exception as e:
        logger.error(f"Error creating database: {e}")
        raise


async def validate_server(config: DatabaseConfig) -> None:
    """Check the server meets the minimum PostgreSQL version."""
    conn = await asyncpg.connect(_asyncpg_dsn(config, config.database))
    try:
        await validate_database_compatibility_async(conn)
    finally:
        await conn.close()


def load_sample_rows(config: DatabaseConfig) -> None:
    """Load sample data for development."""
    manager = DatabaseManager(config)
    try:
        with manager.transaction() as session:
            load_sample_data(session)
    except Exception as e:
        logger.error(f"Error loading sample data: {e}")
        raise
    finally:
        manager.close()


async def main():
    """Main initialization function."""
    parser = argparse.ArgumentParser(description="Initialize forest database")
    parser.add_argument(
        "--no-sample-data",
        action="store_true",
        help="Skip loading sample data"
    )
    parser.add_argument(
        "--database-url",
        help="Database URL (overrides DATABASE_URL env var)"
    )
    parser.add_argument(
        "--on-delete",
        choices=[p.value for p in ForeignKeyPolicy],
        default=ForeignKeyPolicy.CASCADE.value,
        help="Foreign key ON DELETE policy (default: cascade)"
    )
    args = parser.parse_args()

    database_url = resolve_database_url(args.database_url)
    config = DatabaseConfig.from_url(database_url)

    try:
        # Create database if needed
        await create_database_if_not_exists(config)

        # Check server version
        await validate_server(config)

        # Run migrations
        run_alembic_migrations(database_url, on_delete=ForeignKeyPolicy(args.on_delete))

        # Load sample data if requested
        if not args.no_sample_data:
            load_sample_rows(config)

        logger.info("Database initialization completed successfully!")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
