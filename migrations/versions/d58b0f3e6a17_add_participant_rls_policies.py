"""add_participant_rls_policies

Revision ID: d58b0f3e6a17
Revises: 7c41d2e9a0b3
Create Date: 2026-10-18 09:52:47.618030

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "d58b0f3e6a17"
down_revision: str | Sequence[str] | None = "7c41d2e9a0b3"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add Row Level Security policies for participant-scoped tables.

    Note: The FastAPI backend connects with a service account that bypasses RLS.
    These policies govern direct Supabase client connections only. Writes to
    likes, matches and messages go through the API, so clients only get
    read access (plus their own profile).
    """
    for table in ["profiles", "likes", "matches", "messages"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles ---
    # SELECT: any signed-in user may browse profiles
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING (
                (SELECT auth.uid()) IS NOT NULL
            );
    """)
    # UPDATE: only the owner
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (
                id = (SELECT auth.uid())
            );
    """)

    # --- Likes ---
    # SELECT: only likes the user has given
    op.execute("""
        CREATE POLICY likes_select ON likes
            FOR SELECT USING (
                from_id = (SELECT auth.uid())
            );
    """)

    # --- Matches ---
    # SELECT: participants only
    op.execute("""
        CREATE POLICY matches_select ON matches
            FOR SELECT USING (
                (SELECT auth.uid()) IN (user_a, user_b)
            );
    """)

    # --- Messages ---
    # SELECT: participants of the owning match
    op.execute("""
        CREATE POLICY messages_select ON messages
            FOR SELECT USING (
                match_id IN (
                    SELECT id FROM matches
                    WHERE (SELECT auth.uid()) IN (user_a, user_b)
                )
            );
    """)


def downgrade() -> None:
    """Drop participant RLS policies and disable RLS."""
    policies = [
        ("messages_select", "messages"),
        ("matches_select", "matches"),
        ("likes_select", "likes"),
        ("profiles_update", "profiles"),
        ("profiles_select", "profiles"),
    ]
    for policy_name, table_name in policies:
        op.execute(f"DROP POLICY IF EXISTS {policy_name} ON {table_name};")

    for table in ["messages", "matches", "likes", "profiles"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
