"""Generic query and mutation helpers.

Thin wrappers around SQLAlchemy that mirror how the forest tables are used:
text queries with bound parameters whose rows can be projected and reduced,
and insert / update-by-filter / delete-by-filter on the ORM models.

None of these functions commit; the caller's session owns the transaction.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, text, update
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def first(rows: Sequence[Any]) -> Any | None:
    """Result-set reducer returning the first row, or None when empty."""
    return rows[0] if rows else None


def count(rows: Sequence[Any]) -> int:
    """Result-set reducer returning the number of rows."""
    return len(rows)


def query(
    session: Session,
    sql: str,
    params: Mapping[str, Any] | None = None,
    row_fn: Callable[[Row], Any] | None = None,
    result_fn: Callable[[list], Any] | None = None,
) -> Any:
    """Run a parameterized SQL query.

    Parameters are SQLAlchemy named binds and are never interpolated into
    the SQL text.

    Example:
        query(
            session,
            "SELECT id FROM state WHERE abrv = :abrv",
            {"abrv": "AL"},
            row_fn=lambda row: row.id,
            result_fn=first,
        )

    Args:
        session: Open session
        sql: SQL text using ``:name`` placeholders
        params: Values for the placeholders
        row_fn: Applied to every row (row projection)
        result_fn: Applied to the list of projected rows (result-set reduction)

    Returns:
        The list of rows, or whatever ``result_fn`` returns
    """
    result = session.execute(text(sql), dict(params or {}))
    rows = result.all()
    if row_fn is not None:
        rows = [row_fn(row) for row in rows]
    if result_fn is not None:
        return result_fn(rows)
    return rows


def scalar(session: Session, sql: str, params: Mapping[str, Any] | None = None) -> Any:
    """Run a query and return the first column of the first row (or None)."""
    return session.execute(text(sql), dict(params or {})).scalar()


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def _values(data: BaseModel | Mapping[str, Any]) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


def _execute_bulk(session: Session, stmt) -> int:
    # No RETURNING; loaded rows are expired instead of synchronized
    session.flush()
    result = session.execute(stmt, execution_options={"synchronize_session": False})
    session.expire_all()
    return result.rowcount


def insert(session: Session, model: type[ModelT], **values: Any) -> ModelT:
    """Insert a single row and return it with its generated id."""
    instance = model(**values)
    session.add(instance)
    session.flush()
    return instance


def insert_many(
    session: Session,
    model: type[ModelT],
    rows: Iterable[BaseModel | Mapping[str, Any]],
) -> list[ModelT]:
    """Batch insert rows and return them with their generated ids."""
    instances = [model(**_values(row)) for row in rows]
    if not instances:
        return []
    session.add_all(instances)
    session.flush()
    logger.debug(f"Inserted {len(instances)} {model.__name__} rows")
    return instances


def update_where(
    session: Session,
    model: type,
    values: BaseModel | Mapping[str, Any],
    *criteria: Any,
) -> int:
    """Update every row matching ``criteria``.

    Example:
        update_where(session, StateForest, {"acres": 7200}, StateForest.name == "Geneva")

    Returns:
        Number of rows updated
    """
    changes = _values(values)
    if not changes:
        return 0
    stmt = update(model).where(*criteria).values(**changes)
    return _execute_bulk(session, stmt)


def delete_where(session: Session, model: type, *criteria: Any) -> int:
    """Delete every row matching ``criteria``.

    Foreign key violations (``RESTRICT`` policy) propagate as
    ``sqlalchemy.exc.IntegrityError``.

    Returns:
        Number of rows deleted
    """
    return _execute_bulk(session, delete(model).where(*criteria))


def update_row(session: Session, instance: ModelT, changes: BaseModel | Mapping[str, Any]) -> ModelT:
    """Apply ``changes`` to a loaded row and flush it."""
    for key, value in _values(changes).items():
        setattr(instance, key, value)
    session.flush()
    return instance
