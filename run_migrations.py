#!/usr/bin/env python3
"""Run forest schema migrations.

This script:
1. Resolves the database URL (--database-url, DATABASE_URL or DB_* variables)
2. Runs Alembic migrations up to a revision (default: head)
3. Optionally downgrades to a revision instead
"""

import os
import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from alembic.config import Config
from alembic import command

from forest_schema.config import DatabaseConfig
from forest_schema.schemas import ForeignKeyPolicy

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

ALEMBIC_INI = Path(__file__).parent / "forest_schema" / "alembic.ini"


def alembic_config(
    database_url: str,
    on_delete: ForeignKeyPolicy = ForeignKeyPolicy.CASCADE,
    on_update: ForeignKeyPolicy = ForeignKeyPolicy.CASCADE,
) -> Config:
    """Build the Alembic configuration for a database.

    Args:
        database_url: PostgreSQL connection string
        on_delete: Foreign key ON DELETE policy for the initial revision
        on_update: Foreign key ON UPDATE policy for the initial revision
    """
    db_config = DatabaseConfig.from_url(database_url)

    alembic_cfg = Config(str(ALEMBIC_INI))
    # ConfigParser treats % as interpolation
    alembic_cfg.set_main_option(
        "sqlalchemy.url",
        db_config.url.render_as_string(hide_password=False).replace("%", "%%"),
    )
    alembic_cfg.attributes["url_configured"] = True
    alembic_cfg.attributes["on_delete"] = ForeignKeyPolicy(on_delete).value
    alembic_cfg.attributes["on_update"] = ForeignKeyPolicy(on_update).value
    return alembic_cfg


def run_alembic_migrations(
    database_url: str,
    revision: str = "head",
    on_delete: ForeignKeyPolicy = ForeignKeyPolicy.CASCADE,
    on_update: ForeignKeyPolicy = ForeignKeyPolicy.CASCADE,
) -> None:
    """Upgrade the database to ``revision``."""
    alembic_cfg = alembic_config(database_url, on_delete, on_update)

    try:
        logger.info(f"Running migrations to revision: {revision}")
        command.upgrade(alembic_cfg, revision)
        logger.info("Alembic migrations completed successfully")
    except Exception as e:
        logger.error(f"Error running Alembic migrations: {e}")
        raise


def downgrade_alembic_migrations(database_url: str, revision: str) -> None:
    """Downgrade the database to ``revision`` (use "base" to drop everything)."""
    alembic_cfg = alembic_config(database_url)

    try:
        logger.info(f"Downgrading to revision: {revision}")
        command.downgrade(alembic_cfg, revision)
        logger.info("Alembic downgrade completed successfully")
    except Exception as e:
        logger.error(f"Error downgrading Alembic migrations: {e}")
        raise


def resolve_database_url(database_url: Optional[str] = None) -> str:
    """Pick the URL from the argument, DATABASE_URL, or the DB_* variables."""
    if database_url:
        return database_url
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")
    return DatabaseConfig.from_env().url.render_as_string(hide_password=False)


def main():
    """Main migration function."""
    parser = argparse.ArgumentParser(description="Run forest schema migrations")
    parser.add_argument(
        "--database-url",
        help="Database URL (overrides DATABASE_URL env var)"
    )
    parser.add_argument(
        "--revision",
        default="head",
        help="Target revision (default: head)"
    )
    parser.add_argument(
        "--downgrade",
        metavar="REVISION",
        help="Downgrade to this revision instead of upgrading"
    )
    parser.add_argument(
        "--on-delete",
        choices=[p.value for p in ForeignKeyPolicy],
        default=ForeignKeyPolicy.CASCADE.value,
        help="Foreign key ON DELETE policy (default: cascade)"
    )
    parser.add_argument(
        "--on-update",
        choices=[p.value for p in ForeignKeyPolicy],
        default=ForeignKeyPolicy.CASCADE.value,
        help="Foreign key ON UPDATE policy (default: cascade)"
    )
    args = parser.parse_args()

    database_url = resolve_database_url(args.database_url)

    try:
        if args.downgrade:
            downgrade_alembic_migrations(database_url, args.downgrade)
        else:
            run_alembic_migrations(
                database_url,
                args.revision,
                ForeignKeyPolicy(args.on_delete),
                ForeignKeyPolicy(args.on_update),
            )
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
