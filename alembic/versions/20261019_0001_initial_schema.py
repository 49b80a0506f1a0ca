"""Initial schema - course content access

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False, default='student'),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Course catalogue
    op.create_table(
        'course_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('course_categories.id'), nullable=True),
        sa.Column('path', sa.String(255), nullable=False, index=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, default=0),
    )

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('course_categories.id'), nullable=False, index=True),
        sa.Column('short_name', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(254), nullable=False),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('visible', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'course_modules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('module_name', sa.String(50), nullable=False),
        sa.Column('instance_id', sa.Integer(), nullable=False, default=0),
        sa.Column('name', sa.String(255), nullable=False, default=''),
        sa.Column('visible', sa.Boolean(), nullable=False, default=True),
    )

    op.create_table(
        'enrolments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', sa.Integer(), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_enrolments_user_course'),
    )

    # Contexts and roles
    op.create_table(
        'contexts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('context_level', sa.Integer(), nullable=False),
        sa.Column('instance_id', sa.Integer(), nullable=False, default=0),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('contexts.id'), nullable=True),
    )
    op.create_index('ix_contexts_level_instance', 'contexts', ['context_level', 'instance_id'], unique=True)

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('short_name', sa.String(100), unique=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False, default=''),
        sa.Column('sort_order', sa.Integer(), nullable=False, default=0),
        sa.Column('default_enrol', sa.Boolean(), nullable=False, default=True),
    )

    op.create_table(
        'role_assignments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('context_id', sa.Integer(), sa.ForeignKey('contexts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
    )
    op.create_index('ix_role_assignments_role_context', 'role_assignments', ['role_id', 'context_id'])

    # Stored files (bytes live in the file store)
    op.create_table(
        'stored_files',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('context_id', sa.Integer(), sa.ForeignKey('contexts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('component', sa.String(100), nullable=False),
        sa.Column('file_area', sa.String(50), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False, default=0),
        sa.Column('file_path', sa.String(255), nullable=False, default='/'),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('content_hash', sa.String(40), nullable=False, default=''),
        sa.Column('mime_type', sa.String(100), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False, default=0),
        sa.Column('access_enabled', sa.Boolean(), nullable=False, default=True),
        sa.Column('access_level', sa.String(20), nullable=False, default='none'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint(
            'context_id', 'component', 'file_area', 'item_id', 'file_path', 'file_name',
            name='uq_stored_files_location',
        ),
    )

    # Scheduled tasks
    op.create_table(
        'task_scheduled',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('classname', sa.String(255), unique=True, nullable=False),
        sa.Column('component', sa.String(255), nullable=False),
        sa.Column('blocking', sa.Boolean(), nullable=False, default=False),
        sa.Column('customised', sa.Boolean(), nullable=False, default=False),
        sa.Column('lastruntime', sa.Integer(), nullable=True),
        sa.Column('nextruntime', sa.Integer(), nullable=True),
        sa.Column('faildelay', sa.Integer(), nullable=False, default=0),
        sa.Column('minute', sa.String(25), nullable=False, default='*'),
        sa.Column('hour', sa.String(25), nullable=False, default='*'),
        sa.Column('day', sa.String(25), nullable=False, default='*'),
        sa.Column('month', sa.String(25), nullable=False, default='*'),
        sa.Column('dayofweek', sa.String(25), nullable=False, default='*'),
        sa.Column('disabled', sa.Boolean(), nullable=False, default=False),
    )

    # Event log (immutable)
    op.create_table(
        'event_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_type', sa.String(100), nullable=False, index=True),
        sa.Column('crud', sa.String(1), nullable=False, default='r'),
        sa.Column('edu_level', sa.Integer(), nullable=False, default=0),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('context_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('payload', sa.JSON(), nullable=False),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=True),
    )
    op.create_index('ix_event_logs_entity', 'event_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_event_logs_type_time', 'event_logs', ['event_type', 'created_at'])


def downgrade() -> None:
    op.drop_table('event_logs')
    op.drop_table('task_scheduled')
    op.drop_table('stored_files')
    op.drop_table('role_assignments')
    op.drop_table('roles')
    op.drop_table('contexts')
    op.drop_table('enrolments')
    op.drop_table('course_modules')
    op.drop_table('courses')
    op.drop_table('course_categories')
    op.drop_table('users')
