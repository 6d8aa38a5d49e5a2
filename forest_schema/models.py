"""SQLAlchemy ORM models for the state forest schema.

Four tables: ``state`` owns ``state_forest`` rows (one-to-many), and
``state_forest`` relates to ``activity`` through the ``state_forest_activity``
join table (many-to-many). Foreign keys default to ``ON DELETE CASCADE`` /
``ON UPDATE CASCADE``; ``forest_schema.ddl`` can emit the same tables with a
``RESTRICT`` policy instead.
"""

from sqlalchemy import (
    Column, String, Integer, Text, ForeignKey, MetaData,
    UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import declarative_base, relationship

from .constants import NAMING_CONVENTION

# Create base class for all models
Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


class State(Base):
    """A US state, keyed by surrogate id and known by name or abbreviation."""
    __tablename__ = 'state'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    abrv = Column(String(2), nullable=False)

    # Relationships
    forests = relationship(
        'StateForest',
        back_populates='state',
        passive_deletes=True,
        order_by='StateForest.name',
    )

    __table_args__ = (
        UniqueConstraint('name'),
        UniqueConstraint('abrv'),
    )

    def __repr__(self):
        return f"<State(id={self.id}, name={self.name!r}, abrv={self.abrv!r})>"


class StateForest(Base):
    """A state forest owned by exactly one state."""
    __tablename__ = 'state_forest'

    id = Column(Integer, primary_key=True, autoincrement=True)
    state_id = Column(
        Integer,
        ForeignKey('state.id', ondelete='CASCADE', onupdate='CASCADE'),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    acres = Column(Integer, nullable=False)

    # Relationships
    state = relationship('State', back_populates='forests')
    activities = relationship(
        'Activity',
        secondary='state_forest_activity',
        back_populates='forests',
        passive_deletes=True,
        order_by='Activity.name',
    )

    __table_args__ = (
        UniqueConstraint('state_id', 'name'),
        CheckConstraint('acres >= 0', name='acres_non_negative'),
        Index('idx_state_forest_name', 'name'),
    )

    def __repr__(self):
        return (
            f"<StateForest(id={self.id}, state_id={self.state_id}, "
            f"name={self.name!r}, acres={self.acres})>"
        )


class Activity(Base):
    """Something visitors can do in a forest (hiking, camping, ...)."""
    __tablename__ = 'activity'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)

    # Relationships
    forests = relationship(
        'StateForest',
        secondary='state_forest_activity',
        back_populates='activities',
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint('name'),
    )

    def __repr__(self):
        return f"<Activity(id={self.id}, name={self.name!r})>"


class StateForestActivity(Base):
    """Join row linking a forest to an activity offered there."""
    __tablename__ = 'state_forest_activity'

    forest_id = Column(
        Integer,
        ForeignKey('state_forest.id', ondelete='CASCADE', onupdate='CASCADE'),
        primary_key=True,
    )
    activity_id = Column(
        Integer,
        ForeignKey('activity.id', ondelete='CASCADE', onupdate='CASCADE'),
        primary_key=True,
    )

    __table_args__ = (
        Index('idx_state_forest_activity_activity', 'activity_id'),
    )

    def __repr__(self):
        return (
            f"<StateForestActivity(forest_id={self.forest_id}, "
            f"activity_id={self.activity_id})>"
        )
