"""Natural key lookups.

Translate a human-readable key (state name or abbreviation, forest name,
activity name) into the surrogate id of the matching row.

``state_id`` / ``forest_id`` / ``activity_id`` return the first match or
``None``; no uniqueness is assumed. The ``resolve_*`` variants return exactly
one id and raise ``UnknownKeyError`` or ``AmbiguousKeyError`` otherwise. The
loaders use the strict variants.
"""

from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .constants import STATE_ABBREVIATION_LENGTH
from .models import State, StateForest, Activity
from .schemas import (
    normalize_abbreviation,
    normalize_activity_name,
    normalize_forest_name,
    normalize_state_name,
)


class UnknownKeyError(LookupError):
    """No row matches a natural key."""

    def __init__(self, entity: str, keys):
        if isinstance(keys, str):
            keys = [keys]
        self.entity = entity
        self.keys = list(keys)
        super().__init__(f"Unknown {entity}: {', '.join(repr(k) for k in self.keys)}")


class AmbiguousKeyError(LookupError):
    """More than one row matches a natural key."""

    def __init__(self, entity: str, key: str, ids: List[int]):
        self.entity = entity
        self.key = key
        self.ids = ids
        super().__init__(f"{entity} {key!r} matches {len(ids)} rows (ids {ids})")


def _state_filter(key: str):
    if len(key.strip()) == STATE_ABBREVIATION_LENGTH:
        return State.abrv == normalize_abbreviation(key)
    return State.name == normalize_state_name(key)


def _first(session: Session, stmt) -> Optional[int]:
    return session.scalars(stmt.limit(1)).first()


def _exactly_one(session: Session, stmt, entity: str, key: str) -> int:
    # Two rows are enough to tell "one" from "many"
    ids = list(session.scalars(stmt.limit(2)).all())
    if not ids:
        raise UnknownKeyError(entity, key)
    if len(ids) > 1:
        ids = list(session.scalars(stmt).all())
        raise AmbiguousKeyError(entity, key, ids)
    return ids[0]


def _state_stmt(key: str):
    return select(State.id).where(_state_filter(key)).order_by(State.id)


def _forest_stmt(name: str, owner_id: Optional[int] = None):
    stmt = select(StateForest.id).where(StateForest.name == normalize_forest_name(name))
    if owner_id is not None:
        stmt = stmt.where(StateForest.state_id == owner_id)
    return stmt.order_by(StateForest.id)


def _activity_stmt(name: str):
    return (
        select(Activity.id)
        .where(Activity.name == normalize_activity_name(name))
        .order_by(Activity.id)
    )


def state_id(session: Session, key: str) -> Optional[int]:
    """Id of the state with this abbreviation (two characters) or name."""
    return _first(session, _state_stmt(key))


def forest_id(session: Session, name: str) -> Optional[int]:
    """Id of the first state forest with this name."""
    return _first(session, _forest_stmt(name))


def activity_id(session: Session, name: str) -> Optional[int]:
    """Id of the activity with this name."""
    return _first(session, _activity_stmt(name))


def resolve_state(session: Session, key: str) -> int:
    return _exactly_one(session, _state_stmt(key), "state", key)


def resolve_forest(session: Session, name: str, state_key: Optional[str] = None) -> int:
    """Id of the only forest with this name.

    The same forest name may exist in several states; pass ``state_key``
    (state name or abbreviation) to pick one of them.
    """
    if state_key is None:
        return _exactly_one(session, _forest_stmt(name), "state forest", name)
    owner_id = resolve_state(session, state_key)
    key = f"{name} ({state_key})"
    return _exactly_one(session, _forest_stmt(name, owner_id), "state forest", key)


def resolve_activity(session: Session, name: str) -> int:
    return _exactly_one(session, _activity_stmt(name), "activity", name)


def activity_ids(session: Session) -> Dict[str, int]:
    """Map every activity name to its id."""
    rows = session.execute(select(Activity.name, Activity.id)).all()
    return {name: id_ for name, id_ in rows}
