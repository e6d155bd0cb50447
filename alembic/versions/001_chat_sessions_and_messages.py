"""001 – Chat sessions and messages.

Creates ``chat_sessions`` and ``chat_messages`` with the listing indexes the
API relies on. Both tables are soft-deleted through ``deleted_at``.

Revision ID: 001_chat_sessions_and_messages
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = "001_chat_sessions_and_messages"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ══════════════════════════════════════════════════════════════════
    # 1. chat_sessions
    # ══════════════════════════════════════════════════════════════════
    op.create_table(
        "chat_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(200), nullable=False),
        sa.Column("title", sa.String(500)),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "idx_chat_sessions_user_listing", "chat_sessions", ["user_id", "deleted_at"],
    )

    # ══════════════════════════════════════════════════════════════════
    # 2. chat_messages
    # ══════════════════════════════════════════════════════════════════
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "session_id",
            sa.Uuid(),
            sa.ForeignKey("chat_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint(
            "role IN ('user', 'assistant', 'system')", name="ck_chat_messages_role",
        ),
    )
    op.create_index(
        "idx_chat_messages_session_listing", "chat_messages", ["session_id", "deleted_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_chat_messages_session_listing", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("idx_chat_sessions_user_listing", table_name="chat_sessions")
    op.drop_table("chat_sessions")
