"""Schema creation with configurable foreign key policies.

The ORM models declare ``CASCADE`` on every foreign key. ``metadata_with_policy``
copies the model tables into a fresh ``MetaData`` and rewrites the
``ON DELETE`` / ``ON UPDATE`` clause of each foreign key, so the same table
layout can be created with a ``RESTRICT`` policy. Queries keep using the ORM
models; only table and column names matter to them.
"""

import logging
from typing import Union

from sqlalchemy import MetaData
from sqlalchemy.engine import Dialect, Engine
from sqlalchemy.schema import CreateTable

from .constants import NAMING_CONVENTION
from .models import Base
from .schemas import ForeignKeyPolicy

logger = logging.getLogger(__name__)

PolicyLike = Union[ForeignKeyPolicy, str]


def _coerce_policy(policy: PolicyLike) -> ForeignKeyPolicy:
    if isinstance(policy, ForeignKeyPolicy):
        return policy
    return ForeignKeyPolicy(str(policy).lower())


def metadata_with_policy(
    on_delete: PolicyLike = ForeignKeyPolicy.CASCADE,
    on_update: PolicyLike = ForeignKeyPolicy.CASCADE,
) -> MetaData:
    """Copy the model tables, applying the given foreign key policies.

    Args:
        on_delete: Policy for ``ON DELETE`` on every foreign key
        on_update: Policy for ``ON UPDATE`` on every foreign key

    Returns:
        MetaData holding ``state``, ``state_forest``, ``activity`` and
        ``state_forest_activity``
    """
    on_delete = _coerce_policy(on_delete)
    on_update = _coerce_policy(on_update)

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
    for table in Base.metadata.sorted_tables:
        copied = table.to_metadata(metadata)
        for constraint in copied.foreign_key_constraints:
            constraint.ondelete = on_delete.sql
            constraint.onupdate = on_update.sql
            for fk in constraint.elements:
                fk.ondelete = on_delete.sql
                fk.onupdate = on_update.sql
    return metadata


def create_schema(
    engine: Engine,
    on_delete: PolicyLike = ForeignKeyPolicy.CASCADE,
    on_update: PolicyLike = ForeignKeyPolicy.CASCADE,
) -> MetaData:
    """Create the four forest tables if they don't already exist.

    Returns:
        The metadata the tables were created from
    """
    metadata = metadata_with_policy(on_delete, on_update)
    metadata.create_all(bind=engine, checkfirst=True)
    logger.info(
        f"Forest schema created (ON DELETE {_coerce_policy(on_delete).sql}, "
        f"ON UPDATE {_coerce_policy(on_update).sql})"
    )
    return metadata


def drop_schema(engine: Engine) -> None:
    """Drop the forest tables, children first."""
    Base.metadata.drop_all(bind=engine, checkfirst=True)
    logger.info("Forest schema dropped")


def schema_ddl(
    dialect: Dialect,
    on_delete: PolicyLike = ForeignKeyPolicy.CASCADE,
    on_update: PolicyLike = ForeignKeyPolicy.CASCADE,
) -> str:
    """Render the ``CREATE TABLE`` statements for a dialect.

    Example:
        print(schema_ddl(postgresql.dialect(), on_delete="restrict"))
    """
    metadata = metadata_with_policy(on_delete, on_update)
    statements = [
        str(CreateTable(table).compile(dialect=dialect)).strip()
        for table in metadata.sorted_tables
    ]
    return ";\n\n".join(statements) + ";"
