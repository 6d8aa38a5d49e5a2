"""Initial forest schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates state, state_forest, activity and the state_forest_activity join
table. Foreign keys use ON DELETE / ON UPDATE CASCADE unless the
``on_delete`` / ``on_update`` config attributes (or ``-x on_delete=restrict``)
say otherwise.
"""
from typing import Sequence, Union

from alembic import context, op
import sqlalchemy as sa

from forest_schema.schemas import ForeignKeyPolicy

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _policy(name: str) -> str:
    value = context.config.attributes.get(name)
    if value is None:
        value = context.get_x_argument(as_dictionary=True).get(name, "cascade")
    return ForeignKeyPolicy(str(value).lower()).sql


def upgrade() -> None:
    on_delete = _policy("on_delete")
    on_update = _policy("on_update")

    # Create state table
    op.create_table('state',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('abrv', sa.String(length=2), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_state'),
        sa.UniqueConstraint('name', name='uq_state_name'),
        sa.UniqueConstraint('abrv', name='uq_state_abrv')
    )

    # Create activity table
    op.create_table('activity',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_activity'),
        sa.UniqueConstraint('name', name='uq_activity_name')
    )

    # Create state_forest table
    op.create_table('state_forest',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('state_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('acres', sa.Integer(), nullable=False),
        sa.CheckConstraint('acres >= 0', name='ck_state_forest_acres_non_negative'),
        sa.ForeignKeyConstraint(
            ['state_id'], ['state.id'],
            name='fk_state_forest_state_id_state',
            ondelete=on_delete, onupdate=on_update
        ),
        sa.PrimaryKeyConstraint('id', name='pk_state_forest'),
        sa.UniqueConstraint('state_id', 'name', name='uq_state_forest_state_id')
    )
    op.create_index('idx_state_forest_name', 'state_forest', ['name'])

    # Create state_forest_activity join table
    op.create_table('state_forest_activity',
        sa.Column('forest_id', sa.Integer(), nullable=False),
        sa.Column('activity_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ['forest_id'], ['state_forest.id'],
            name='fk_state_forest_activity_forest_id_state_forest',
            ondelete=on_delete, onupdate=on_update
        ),
        sa.ForeignKeyConstraint(
            ['activity_id'], ['activity.id'],
            name='fk_state_forest_activity_activity_id_activity',
            ondelete=on_delete, onupdate=on_update
        ),
        sa.PrimaryKeyConstraint('forest_id', 'activity_id', name='pk_state_forest_activity')
    )
    op.create_index('idx_state_forest_activity_activity', 'state_forest_activity', ['activity_id'])


def downgrade() -> None:
    op.drop_index('idx_state_forest_activity_activity', table_name='state_forest_activity')
    op.drop_table('state_forest_activity')
    op.drop_index('idx_state_forest_name', table_name='state_forest')
    op.drop_table('state_forest')
    op.drop_table('activity')
    op.drop_table('state')
