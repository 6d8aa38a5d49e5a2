"""Load and read the state -> forest -> activity relationships by natural key.

Each helper resolves names to ids through ``forest_schema.lookups`` and then
issues plain inserts or selects. Helpers flush but never commit, so a caller
that needs the resolve-then-insert sequence to be atomic wraps the calls in
``DatabaseManager.transaction()``.
"""

import logging
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .crud import insert_many
from .lookups import (
    UnknownKeyError,
    activity_ids,
    resolve_forest,
    resolve_state,
)
from .models import Activity, State, StateForest, StateForestActivity
from .schemas import (
    ActivityCreate,
    StateCreate,
    StateForestCreate,
    normalize_activity_name,
)

logger = logging.getLogger(__name__)

ForestInput = Union[Tuple[str, int], Mapping, StateForestCreate]
StateInput = Union[Tuple[str, str], Mapping, StateCreate]


def _state_row(state: StateInput) -> StateCreate:
    if isinstance(state, StateCreate):
        return state
    if isinstance(state, Mapping):
        return StateCreate(**state)
    name, abrv = state
    return StateCreate(name=name, abrv=abrv)


def _forest_row(forest: ForestInput, state_id: int) -> StateForestCreate:
    if isinstance(forest, StateForestCreate):
        data = forest.model_dump()
    elif isinstance(forest, Mapping):
        data = dict(forest)
    else:
        name, acres = forest
        data = {"name": name, "acres": acres}
    data["state_id"] = state_id
    return StateForestCreate(**data)


def load_states(session: Session, states: Iterable[StateInput]) -> List[State]:
    """Batch insert states given as ``(name, abrv)`` pairs or schemas."""
    rows = [_state_row(state) for state in states]
    created = insert_many(session, State, rows)
    logger.info(f"Loaded {len(created)} states")
    return created


def load_activities(session: Session, names: Iterable[str]) -> List[Activity]:
    """Batch insert activities; names are stored lower-cased."""
    rows = [ActivityCreate(name=name) for name in names]
    created = insert_many(session, Activity, rows)
    logger.info(f"Loaded {len(created)} activities")
    return created


def load_forests(
    session: Session,
    forests: Iterable[ForestInput],
    state_key: str,
) -> List[StateForest]:
    """Batch insert forests owned by one state.

    Args:
        session: Open session
        forests: ``(name, acres)`` pairs (or mappings / schemas)
        state_key: State name or two-letter abbreviation

    Returns:
        The inserted rows, in input order

    Raises:
        UnknownKeyError: If ``state_key`` matches no state
        AmbiguousKeyError: If ``state_key`` matches several states
        pydantic.ValidationError: If a pair has a blank name or negative acres
    """
    owner_id = resolve_state(session, state_key)
    rows = [_forest_row(forest, owner_id) for forest in forests]
    created = insert_many(session, StateForest, rows)
    logger.info(f"Loaded {len(created)} forests for state {state_key!r}")
    return created


def load_forest_activities(
    session: Session,
    forest_name: str,
    activity_names: Iterable[str],
    state_key: Optional[str] = None,
) -> List[StateForestActivity]:
    """Link a forest to activities by name.

    Every name is checked before anything is written: if any activity is
    unknown, no join row is inserted. ``state_key`` narrows the forest to one
    state when several states have a forest of that name.

    Raises:
        UnknownKeyError: If the forest or any activity name is unknown
        AmbiguousKeyError: If the forest name matches several forests
    """
    forest = resolve_forest(session, forest_name, state_key)
    mapping = activity_ids(session)

    # Duplicates would collide on the composite primary key
    names = list(dict.fromkeys(normalize_activity_name(n) for n in activity_names))
    unknown = [name for name in names if name not in mapping]
    if unknown:
        raise UnknownKeyError("activity", unknown)

    rows = [{"forest_id": forest, "activity_id": mapping[name]} for name in names]
    created = insert_many(session, StateForestActivity, rows)
    logger.info(f"Linked {len(created)} activities to forest {forest_name!r}")
    return created


def activities_for_forest(
    session: Session,
    forest_name: str,
    state_key: Optional[str] = None,
) -> List[str]:
    """Names of the activities offered in a forest, ordered by name.

    Raises:
        UnknownKeyError: If the forest name is unknown
        AmbiguousKeyError: If the forest name matches several forests and
            no ``state_key`` narrows it
    """
    forest = resolve_forest(session, forest_name, state_key)
    ids = session.scalars(
        select(StateForestActivity.activity_id)
        .where(StateForestActivity.forest_id == forest)
    ).all()
    if not ids:
        return []

    # in_() binds the list as an expanding parameter
    return list(session.scalars(
        select(Activity.name)
        .where(Activity.id.in_(ids))
        .order_by(Activity.name)
    ).all())


def forests_for_state(session: Session, state_key: str) -> List[StateForest]:
    """Forests owned by a state, ordered by name."""
    owner_id = resolve_state(session, state_key)
    return list(session.scalars(
        select(StateForest)
        .where(StateForest.state_id == owner_id)
        .order_by(StateForest.name)
    ).all())


def count_forests(session: Session, state_key: str) -> int:
    """Number of forests owned by a state."""
    owner_id = resolve_state(session, state_key)
    return session.scalar(
        select(func.count()).select_from(StateForest).where(StateForest.state_id == owner_id)
    )
