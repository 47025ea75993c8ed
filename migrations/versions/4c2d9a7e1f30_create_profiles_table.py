"""create_profiles_table

Revision ID: 4c2d9a7e1f30
Revises:
Create Date: 2026-10-19 10:12:41.118204

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c2d9a7e1f30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the profiles document table with Row Level Security.

    Writes go through the API using a service account that bypasses RLS,
    so only a public read policy is declared for direct client access.
    """
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column(
            "document",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )

    op.execute("ALTER TABLE profiles ENABLE ROW LEVEL SECURITY;")
    # SELECT: anyone holding a share link may read a profile
    op.execute("""
        CREATE POLICY profile_public_select ON profiles
            FOR SELECT USING (true);
    """)


def downgrade() -> None:
    """Drop the profiles table and its policy."""
    op.execute("DROP POLICY IF EXISTS profile_public_select ON profiles;")
    op.drop_table("profiles")
