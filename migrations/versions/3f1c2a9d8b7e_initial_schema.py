"""initial_schema

Create the schema for the fine tracker's comment threads:
- Users (display name and username snapshotted onto comments)
- Fines (only the columns comments read or write, including comment_count)
- Comments (two-level threads, soft deletes)
- notify_comment_change trigger feeding the comment_changes channel

Revision ID: 3f1c2a9d8b7e
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d8b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    # ========================================================================
    # FINES table
    # ========================================================================
    op.create_table(
        "fines",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("subject_name", sa.String(length=255), nullable=False),
        sa.Column("proposer_name", sa.String(length=255), nullable=False),
        sa.Column(
            "comment_count", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("comment_count >= 0", name="fine_comment_count_positive"),
    )

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("fine_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("author_name", sa.String(length=255), nullable=False),
        sa.Column("author_username", sa.String(length=255), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "is_deleted", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "is_edited", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["fine_id"], ["fines.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "char_length(content) BETWEEN 1 AND 2000",
            name="comment_content_length",
        ),
    )

    op.create_index(
        "idx_comments_fine_created", "comments", ["fine_id", "created_at"]
    )
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])

    # ========================================================================
    # Change notifications
    # ========================================================================
    # A soft delete (is_deleted false -> true) is reported as DELETE. NOTIFY
    # payloads are capped at 8000 bytes, so an oversized row is sent without
    # its record and listeners load it by id.
    op.execute("""
        CREATE OR REPLACE FUNCTION notify_comment_change() RETURNS trigger AS $$
        DECLARE
            event TEXT;
            payload TEXT;
        BEGIN
            IF TG_OP = 'INSERT' THEN
                event := 'INSERT';
            ELSIF NOT OLD.is_deleted AND NEW.is_deleted THEN
                event := 'DELETE';
            ELSE
                event := 'UPDATE';
            END IF;

            payload := json_build_object(
                'event', event,
                'fine_id', NEW.fine_id,
                'record', row_to_json(NEW)
            )::text;

            IF octet_length(payload) >= 8000 THEN
                payload := json_build_object(
                    'event', event,
                    'fine_id', NEW.fine_id,
                    'id', NEW.id
                )::text;
            END IF;

            PERFORM pg_notify('comment_changes', payload);
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TRIGGER comments_notify_change
        AFTER INSERT OR UPDATE ON comments
        FOR EACH ROW EXECUTE FUNCTION notify_comment_change()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS comments_notify_change ON comments")
    op.execute("DROP FUNCTION IF EXISTS notify_comment_change()")

    op.drop_index("idx_comments_author_id", table_name="comments")
    op.drop_index("idx_comments_parent_id", table_name="comments")
    op.drop_index("idx_comments_fine_created", table_name="comments")
    op.drop_table("comments")
    op.drop_table("fines")
    op.drop_table("users")
