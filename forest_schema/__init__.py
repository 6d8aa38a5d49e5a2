"""Forest Schema package - database models and helpers for state forests."""

from .constants import (
    DATABASE_REQUIREMENTS,
    VERSION_COMPATIBILITY,
    SUPPORTED_DRIVERS,
)

from .config import DatabaseConfig

from .models import (
    Base,
    State,
    StateForest,
    Activity,
    StateForestActivity,
)

from .schemas import (
    ForeignKeyPolicy,

    # State schemas
    StateBase,
    StateCreate,
    StateUpdate,
    State as StateSchema,

    # State forest schemas
    StateForestBase,
    StateForestCreate,
    StateForestUpdate,
    StateForest as StateForestSchema,

    # Activity schemas
    ActivityBase,
    ActivityCreate,
    ActivityUpdate,
    Activity as ActivitySchema,

    # Join table schema
    StateForestActivity as StateForestActivitySchema,
)

from .ddl import (
    metadata_with_policy,
    create_schema,
    drop_schema,
    schema_ddl,
)

from .database import (
    DatabaseManager,
    get_db_manager,
    get_session,
    init_db,
    close_db,
)

from .validators import (
    parse_postgresql_version,
    validate_postgresql_version_async,
    validate_postgresql_version_sync,
    validate_database_compatibility_async,
    validate_database_compatibility_sync,
    missing_tables,
)

from .crud import (
    query,
    scalar,
    first,
    count,
    insert,
    insert_many,
    update_where,
    delete_where,
    update_row,
)

from .lookups import (
    UnknownKeyError,
    AmbiguousKeyError,
    state_id,
    forest_id,
    activity_id,
    activity_ids,
    resolve_state,
    resolve_forest,
    resolve_activity,
)

from .relationships import (
    load_states,
    load_activities,
    load_forests,
    load_forest_activities,
    activities_for_forest,
    forests_for_state,
    count_forests,
)

from .seed import load_sample_data

__version__ = "0.1.0"

__all__ = [
    # Constants
    "DATABASE_REQUIREMENTS",
    "VERSION_COMPATIBILITY",
    "SUPPORTED_DRIVERS",

    # Configuration
    "DatabaseConfig",

    # Models
    "Base",
    "State",
    "StateForest",
    "Activity",
    "StateForestActivity",

    # Schemas
    "ForeignKeyPolicy",
    "StateBase",
    "StateCreate",
    "StateUpdate",
    "StateSchema",
    "StateForestBase",
    "StateForestCreate",
    "StateForestUpdate",
    "StateForestSchema",
    "ActivityBase",
    "ActivityCreate",
    "ActivityUpdate",
    "ActivitySchema",
    "StateForestActivitySchema",

    # DDL
    "metadata_with_policy",
    "create_schema",
    "drop_schema",
    "schema_ddl",

    # Database
    "DatabaseManager",
    "get_db_manager",
    "get_session",
    "init_db",
    "close_db",

    # Validators
    "parse_postgresql_version",
    "validate_postgresql_version_async",
    "validate_postgresql_version_sync",
    "validate_database_compatibility_async",
    "validate_database_compatibility_sync",
    "missing_tables",

    # Query / mutation helpers
    "query",
    "scalar",
    "first",
    "count",
    "insert",
    "insert_many",
    "update_where",
    "delete_where",
    "update_row",

    # Lookups
    "UnknownKeyError",
    "AmbiguousKeyError",
    "state_id",
    "forest_id",
    "activity_id",
    "activity_ids",
    "resolve_state",
    "resolve_forest",
    "resolve_activity",

    # Relationships
    "load_states",
    "load_activities",
    "load_forests",
    "load_forest_activities",
    "activities_for_forest",
    "forests_for_state",
    "count_forests",

    # Sample data
    "load_sample_data",
]
