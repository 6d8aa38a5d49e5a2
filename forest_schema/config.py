"""Connection configuration for the forest database.

The configuration is a static record: it is built once (usually from the
environment) and handed to the database manager, which never renegotiates it.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.engine import URL, make_url

from .constants import DEFAULT_DRIVER, SUPPORTED_DRIVERS


class DatabaseConfig(BaseModel):
    """Driver, host, database name and credentials for one database."""

    driver: str = DEFAULT_DRIVER
    host: Optional[str] = "localhost"
    port: Optional[int] = 5432
    database: str
    user: Optional[str] = None
    password: Optional[str] = None
    echo: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("driver")
    @classmethod
    def validate_driver(cls, v):
        if v not in SUPPORTED_DRIVERS:
            raise ValueError(
                f"Unsupported database driver '{v}'. "
                f"Expected one of: {', '.join(SUPPORTED_DRIVERS)}"
            )
        return v

    @field_validator("database")
    @classmethod
    def validate_database(cls, v):
        if not v:
            raise ValueError("Database name must not be empty")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")

    @property
    def url(self) -> URL:
        """SQLAlchemy URL for this configuration."""
        if self.is_sqlite:
            return URL.create(self.driver, database=self.database)
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def with_driver(self, driver: str) -> "DatabaseConfig":
        """Copy of this configuration using another driver (e.g. asyncpg)."""
        return type(self)(**{**self.model_dump(), "driver": driver})

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "DatabaseConfig":
        """Build a configuration from a connection string.

        ``postgresql://`` URLs are pinned to the psycopg2 driver.
        """
        url = make_url(database_url)
        driver = url.drivername
        if driver == "postgresql":
            driver = DEFAULT_DRIVER
        return cls(
            driver=driver,
            host=url.host,
            port=url.port,
            database=url.database or "",
            user=url.username,
            password=url.password,
            echo=echo,
        )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Build a configuration from environment variables.

        ``DATABASE_URL`` wins over the individual ``DB_*`` variables.
        """
        load_dotenv()
        echo = os.getenv("SQL_ECHO", "false").lower() == "true"

        database_url = os.getenv("DATABASE_URL")
        if database_url:
            return cls.from_url(database_url, echo=echo)

        return cls(
            driver=os.getenv("DB_DRIVER", DEFAULT_DRIVER),
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "forests"),
            user=os.getenv("DB_USER", "postgres"),
            password=os.getenv("DB_PASSWORD", ""),
            echo=echo,
        )
