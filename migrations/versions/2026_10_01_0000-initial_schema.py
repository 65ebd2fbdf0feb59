"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - users table: Accounts that links can be attributed to
    - links table: Short code to destination mappings with click counts
    """
    bind = op.get_bind()
    inspector = inspect(bind)
    existing_tables = inspector.get_table_names()

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if 'links' not in existing_tables:
        op.create_table(
            'links',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('short_code', sa.String(length=32), nullable=False),
            sa.Column('destination_url', sa.Text(), nullable=False),
            sa.Column('short_url', sa.Text(), nullable=False),
            sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('owner_id', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )

        # Uniqueness of codes is enforced here, not in application code
        op.create_index('ix_links_short_code', 'links', ['short_code'], unique=True)
        op.create_index('ix_links_destination_url', 'links', ['destination_url'])
        op.create_index('ix_links_owner_id', 'links', ['owner_id'])
        op.create_index('ix_links_created_at', 'links', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_links_created_at', table_name='links')
    op.drop_index('ix_links_owner_id', table_name='links')
    op.drop_index('ix_links_destination_url', table_name='links')
    op.drop_index('ix_links_short_code', table_name='links')
    op.drop_table('links')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
