"""create_documents_table

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS documents (
            collection TEXT NOT NULL,
            id TEXT NOT NULL,
            data JSONB NOT NULL DEFAULT '{}'::jsonb,
            created_at TIMESTAMP NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMP NOT NULL DEFAULT NOW(),
            PRIMARY KEY (collection, id)
        );

        -- Equality filters use jsonb containment
        CREATE INDEX IF NOT EXISTS idx_documents_data ON documents USING GIN (data);

        -- Reports are listed per owner, newest first
        CREATE INDEX IF NOT EXISTS idx_documents_reports_owner_date
            ON documents ((data ->> 'userId'), (data ->> 'date'))
            WHERE collection = 'reports';

        CREATE UNIQUE INDEX IF NOT EXISTS idx_documents_users_username
            ON documents ((data ->> 'username'))
            WHERE collection = 'users';
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("""
        DROP TABLE IF EXISTS documents CASCADE;
    """)
