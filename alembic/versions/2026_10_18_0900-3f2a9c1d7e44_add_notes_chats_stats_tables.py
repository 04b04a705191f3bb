"""add notes, chats and daily_stats tables

Revision ID: 3f2a9c1d7e44
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e44"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: notes, chats and daily_stats tables."""
    op.create_table(
        "notes",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("ciphertext", sa.Text(), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("expires_at", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_notes_expires_at", "notes", ["expires_at"], unique=False)

    op.create_table(
        "chats",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("creator_token_hash", sa.String(length=64), nullable=False),
        sa.Column("recipient_token_hash", sa.String(length=64), nullable=False),
        sa.Column("creator_session_hash", sa.String(length=64), nullable=True),
        sa.Column("recipient_session_hash", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("expires_at", sa.BigInteger(), nullable=False),
        sa.Column("current_message", sa.Text(), nullable=True),
        sa.Column("current_sender", sa.String(length=16), nullable=True),
        sa.Column("message_at", sa.BigInteger(), nullable=True),
        sa.Column(
            "message_read",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
    )
    op.create_index("ix_chats_expires_at", "chats", ["expires_at"], unique=False)

    op.create_table(
        "daily_stats",
        sa.Column("date", sa.String(length=10), primary_key=True),
        sa.Column("note_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("chat_count", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade() -> None:
    """Downgrade schema: drop notes, chats and daily_stats tables."""
    op.drop_table("daily_stats")
    op.drop_index("ix_chats_expires_at", table_name="chats")
    op.drop_table("chats")
    op.drop_index("ix_notes_expires_at", table_name="notes")
    op.drop_table("notes")
