"""Response items shared by the comment use cases."""

from datetime import datetime

from pydantic import BaseModel

from finetrack.domain.model.comment import Comment, CommentWithReplies, PendingComment


class CommentItem(BaseModel):
    """Comment item in response."""

    comment_id: str
    fine_id: str
    author_id: str
    author_name: str
    author_username: str
    parent_id: str | None
    content: str
    is_deleted: bool
    is_edited: bool
    is_pending: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment | PendingComment) -> "CommentItem":
        return cls(
            comment_id=str(comment.id),
            fine_id=str(comment.fine_id),
            author_id=str(comment.author_id),
            author_name=comment.author_name,
            author_username=comment.author_username,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            content=comment.content,
            is_deleted=comment.is_deleted,
            is_edited=comment.is_edited,
            is_pending=comment.is_pending,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class ThreadItem(BaseModel):
    """Root comment with its replies."""

    root: CommentItem
    replies: list[CommentItem]
    reply_count: int

    @classmethod
    def from_thread(cls, thread: CommentWithReplies) -> "ThreadItem":
        return cls(
            root=CommentItem.from_comment(thread.root),
            replies=[CommentItem.from_comment(r) for r in thread.replies],
            reply_count=thread.reply_count,
        )
