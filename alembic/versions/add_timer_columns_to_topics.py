"""add timer columns to topics

Revision ID: add_timer_columns_to_topics
Revises: add_username_and_reset_token
Create Date: 2025-09-03 08:05:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'add_timer_columns_to_topics'
down_revision = 'add_username_and_reset_token'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('topics', sa.Column('timer_enabled', sa.Boolean(), nullable=False, server_default='0'))
    op.add_column('topics', sa.Column('timer_seconds', sa.Integer(), nullable=True))


def downgrade() -> None:
    op.drop_column('topics', 'timer_seconds')
    op.drop_column('topics', 'timer_enabled')
