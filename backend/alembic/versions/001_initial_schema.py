"""Initial schema - profiles, projects, tasks, leads, achievements

Revision ID: 001
Revises:
Create Date: 2026-10-19

WHY: Column names keep the camelCase field names of the documents the
admin UI and the public site already read (squareFeet, createdAt, ...).
Statuses and roles are plain strings rather than database enums so
documents imported with legacy values still load.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updatedAt', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade() -> None:
    """Create every table."""
    op.create_table(
        'users',
        sa.Column('uid', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('displayName', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='viewer'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('uid'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'projects',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('location', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('category', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='upcoming'),
        sa.Column('area', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('squareFeet', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timeline', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('percentage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('createdBy', sa.String(length=128), nullable=True),
        sa.Column('updatedBy', sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    # WHY: The public page filters by category and status
    op.create_index('ix_projects_category', 'projects', ['category'])
    op.create_index('ix_projects_status', 'projects', ['status'])

    op.create_table(
        'project_tasks',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('projectId', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='pending'),
        sa.Column('priority', sa.String(length=16), nullable=False, server_default='medium'),
        sa.Column('assignedTo', sa.String(length=128), nullable=True),
        sa.Column('notes', sa.JSON(), nullable=False),
        sa.Column('completedAt', sa.DateTime(timezone=True), nullable=True),
        sa.Column('createdBy', sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['projectId'], ['projects.id']),
    )
    op.create_index('ix_project_tasks_projectId', 'project_tasks', ['projectId'])

    op.create_table(
        'contactLeads',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('subject', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('message', sa.Text(), nullable=False, server_default=''),
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'quotationRequests',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('projectType', sa.String(length=50), nullable=False),
        sa.Column('area', sa.Float(), nullable=False),
        sa.Column('floors', sa.Integer(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('quality', sa.String(length=50), nullable=False),
        sa.Column('estimate', sa.Float(), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'achievements',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('imageUrl', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('date', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('createdBy', sa.String(length=128), nullable=True),
        sa.Column('updatedBy', sa.String(length=128), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade() -> None:
    """Drop every table."""
    op.drop_table('achievements')
    op.drop_table('quotationRequests')
    op.drop_table('contactLeads')
    op.drop_index('ix_project_tasks_projectId', table_name='project_tasks')
    op.drop_table('project_tasks')
    op.drop_index('ix_projects_status', table_name='projects')
    op.drop_index('ix_projects_category', table_name='projects')
    op.drop_table('projects')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
