"""add username and password reset columns to users

Revision ID: add_username_and_reset_token
Revises: 001
Create Date: 2025-08-19 16:40:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'add_username_and_reset_token'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('users', sa.Column('username', sa.String(50), nullable=True))
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.add_column('users', sa.Column('reset_token', sa.String(255), nullable=True))
    op.add_column('users', sa.Column('reset_expires', sa.DateTime(), nullable=True))
    op.create_index(op.f('ix_users_reset_token'), 'users', ['reset_token'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_users_reset_token'), table_name='users')
    op.drop_column('users', 'reset_expires')
    op.drop_column('users', 'reset_token')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_column('users', 'username')
