"""Initial migration - create all tables

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='paused'),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('elapsed_seconds', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_activity', sa.DateTime(), nullable=True),
        sa.Column('auto_paused', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_projects_user_id', 'projects', ['user_id'])
    op.create_index('idx_projects_user_status', 'projects', ['user_id', 'status'])
    op.create_index(
        'uq_projects_one_playing', 'projects', ['user_id'],
        unique=True,
        postgresql_where=sa.text("status = 'playing'"),
        sqlite_where=sa.text("status = 'playing'"),
    )

    # Create waypoints table
    op.create_table(
        'waypoints',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column(
            'project_id', sa.String(36),
            sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=True,
        ),
        sa.Column('project_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_waypoints_user_id', 'waypoints', ['user_id'])
    op.create_index('ix_waypoints_project_id', 'waypoints', ['project_id'])
    op.create_index('idx_waypoints_coordinates', 'waypoints', ['latitude', 'longitude'])

    # Create track_summaries table
    op.create_table(
        'track_summaries',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'project_id', sa.String(36),
            sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_distance', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('point_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_track_summaries_project_id', 'track_summaries', ['project_id'])
    op.create_index('ix_track_summaries_user_id', 'track_summaries', ['user_id'])
    op.create_index(
        'idx_track_summaries_active', 'track_summaries',
        ['project_id', 'user_id', 'is_active'],
    )
    op.create_index(
        'uq_track_summaries_one_active', 'track_summaries', ['project_id', 'user_id'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active'),
    )

    # Create track_points table
    op.create_table(
        'track_points',
        sa.Column(
            'id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'),
            primary_key=True, autoincrement=True,
        ),
        sa.Column(
            'track_id', sa.String(36),
            sa.ForeignKey('track_summaries.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'project_id', sa.String(36),
            sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('accuracy', sa.Float(), nullable=True),
        sa.Column('elevation', sa.Float(), nullable=True),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_track_points_track_id', 'track_points', ['track_id'])
    op.create_index('idx_track_points_track_time', 'track_points', ['track_id', 'recorded_at'])
    op.create_index(
        'idx_track_points_project_user', 'track_points',
        ['project_id', 'user_id', 'recorded_at'],
    )


def downgrade() -> None:
    op.drop_table('track_points')
    op.drop_table('track_summaries')
    op.drop_table('waypoints')
    op.drop_table('projects')
