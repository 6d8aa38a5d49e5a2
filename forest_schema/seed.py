"""Sample data for development databases.

A few southeastern states, some of their state forests (acreage rounded)
and the activities each forest offers.
"""

import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from .lookups import activity_id, resolve_state, state_id
from .models import StateForest, StateForestActivity
from .relationships import (
    load_activities,
    load_forest_activities,
    load_forests,
    load_states,
)
from .schemas import normalize_forest_name

logger = logging.getLogger(__name__)

SAMPLE_STATES = [
    ("Alabama", "AL"),
    ("Florida", "FL"),
    ("Georgia", "GA"),
    ("Mississippi", "MS"),
]

SAMPLE_ACTIVITIES = [
    "camping",
    "fishing",
    "hiking",
    "hunting",
    "horseback riding",
    "mountain biking",
    "swimming",
    "bird watching",
]

SAMPLE_FORESTS = {
    "AL": [
        ("Geneva", 7120),
        ("Little River", 2100),
        ("Choccolocco", 4536),
        ("Weogufka", 240),
    ],
    "FL": [
        ("Blackwater River", 210000),
        ("Tate's Hell", 202437),
        ("Withlacoochee", 157479),
        ("Goethe", 53587),
    ],
    "GA": [
        ("Dawson Forest", 25000),
        ("Paulding Forest", 9000),
    ],
    "MS": [
        ("Camp Shelby", 134000),
    ],
}

SAMPLE_FOREST_ACTIVITIES = {
    "Geneva": ["camping", "fishing", "hunting", "hiking"],
    "Little River": ["camping", "fishing", "hiking", "swimming"],
    "Choccolocco": ["hiking", "hunting", "horseback riding"],
    "Blackwater River": ["camping", "fishing", "hiking", "horseback riding", "swimming"],
    "Tate's Hell": ["camping", "fishing", "hunting", "bird watching"],
    "Withlacoochee": ["camping", "hiking", "mountain biking", "horseback riding"],
    "Dawson Forest": ["hiking", "hunting", "mountain biking"],
}


def _existing_forests(session: Session, owner_id: int) -> set:
    return set(session.scalars(
        select(StateForest.name).where(StateForest.state_id == owner_id)
    ).all())


def _existing_links(session: Session, forest_name: str) -> set:
    forest = session.scalars(
        select(StateForest.id).where(StateForest.name == normalize_forest_name(forest_name))
    ).first()
    if forest is None:
        return set()
    return set(session.scalars(
        select(StateForestActivity.activity_id).where(StateForestActivity.forest_id == forest)
    ).all())


def load_sample_data(session: Session) -> Dict[str, int]:
    """Load the sample data set, skipping rows that already exist.

    Returns:
        Number of rows inserted per table
    """
    counts = {"state": 0, "activity": 0, "state_forest": 0, "state_forest_activity": 0}

    logger.info("Loading sample states...")
    new_states = [s for s in SAMPLE_STATES if state_id(session, s[1]) is None]
    counts["state"] = len(load_states(session, new_states))

    logger.info("Loading sample activities...")
    new_activities = [a for a in SAMPLE_ACTIVITIES if activity_id(session, a) is None]
    counts["activity"] = len(load_activities(session, new_activities))

    logger.info("Loading sample forests...")
    for abrv, forests in SAMPLE_FORESTS.items():
        existing = _existing_forests(session, resolve_state(session, abrv))
        new_forests = [f for f in forests if normalize_forest_name(f[0]) not in existing]
        if new_forests:
            counts["state_forest"] += len(load_forests(session, new_forests, abrv))

    logger.info("Linking sample forests to activities...")
    for forest_name, activities in SAMPLE_FOREST_ACTIVITIES.items():
        linked = _existing_links(session, forest_name)
        new_links = [a for a in activities if activity_id(session, a) not in linked]
        if new_links:
            counts["state_forest_activity"] += len(
                load_forest_activities(session, forest_name, new_links)
            )

    logger.info(f"Sample data loaded: {counts}")
    return counts
