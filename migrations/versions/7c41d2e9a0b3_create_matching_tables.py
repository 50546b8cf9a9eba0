"""create_matching_tables

Revision ID: 7c41d2e9a0b3
Revises:
Create Date: 2026-10-18 09:40:12.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c41d2e9a0b3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, likes, matches and messages tables."""
    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('interested_in', sa.String(length=20), nullable=False),
        sa.Column('bio', sa.Text(), nullable=False, server_default=''),
        sa.Column('hobbies', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('dating_preference', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('age >= 18', name='ck_profiles_adult'),
        sa.CheckConstraint("gender IN ('male', 'female', 'other')", name='ck_profiles_gender'),
        sa.CheckConstraint("interested_in IN ('male', 'female', 'everyone')", name='ck_profiles_interested_in'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('likes',
        sa.Column('from_id', sa.Uuid(), nullable=False),
        sa.Column('to_id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('from_id', 'to_id'),
    )
    # Reciprocal-like lookups go through to_id
    op.create_index(op.f('ix_likes_to_id'), 'likes', ['to_id'], unique=False)

    op.create_table('matches',
        sa.Column('id', sa.String(length=80), nullable=False),
        sa.Column('user_a', sa.Uuid(), nullable=False),
        sa.Column('user_b', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('user_a < user_b', name='ck_matches_canonical_order'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_matches_user_a'), 'matches', ['user_a'], unique=False)
    op.create_index(op.f('ix_matches_user_b'), 'matches', ['user_b'], unique=False)

    op.create_table('messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('match_id', sa.String(length=80), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('seen', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('match_id', 'position', name='uq_messages_match_position'),
    )
    op.create_index('ix_messages_match_order', 'messages', ['match_id', 'created_at', 'position'], unique=False)


def downgrade() -> None:
    """Drop matching tables."""
    op.drop_index('ix_messages_match_order', table_name='messages')
    op.drop_table('messages')
    op.drop_index(op.f('ix_matches_user_b'), table_name='matches')
    op.drop_index(op.f('ix_matches_user_a'), table_name='matches')
    op.drop_table('matches')
    op.drop_index(op.f('ix_likes_to_id'), table_name='likes')
    op.drop_table('likes')
    op.drop_table('profiles')
