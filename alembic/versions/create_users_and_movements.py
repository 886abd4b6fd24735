"""create users, movements and role change logs

Revision ID: 3c1f7a2d9b04
Revises:
Create Date: 2026-10-19 09:12:40

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f7a2d9b04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = sa.Enum('ADMIN', 'USER', name='user_role')
movement_type = sa.Enum('INCOME', 'EXPENSE', name='movement_type')
role_action = sa.Enum('CREATE_USER', 'DELETE_USER', 'SET_ROLE', 'TOGGLE_ROLE', name='role_action')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('role', user_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'movements',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', movement_type, nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('concept', sa.String(length=255), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_movements_user_id', 'movements', ['user_id'])
    op.create_index('ix_movements_date', 'movements', ['date'])

    op.create_table(
        'role_change_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('actor_id', sa.Uuid(), nullable=False),
        sa.Column('target_user_id', sa.Uuid(), nullable=True),
        sa.Column('action', role_action, nullable=False),
        sa.Column('before_role', sa.String(length=20), nullable=True),
        sa.Column('after_role', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_role_change_logs_actor_id', 'role_change_logs', ['actor_id'])


def downgrade() -> None:
    op.drop_index('ix_role_change_logs_actor_id', table_name='role_change_logs')
    op.drop_table('role_change_logs')
    op.drop_index('ix_movements_date', table_name='movements')
    op.drop_index('ix_movements_user_id', table_name='movements')
    op.drop_table('movements')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    role_action.drop(op.get_bind(), checkfirst=True)
    movement_type.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
