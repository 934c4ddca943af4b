"""Pure transforms applied to cached comment results.

Every function returns a new list and leaves its input untouched, which is
what ``QueryCache.patch`` expects. Rows are always replaced whole, by id.
"""

from datetime import timedelta
from typing import Optional, Sequence

from finetrack.domain.model.comment import Comment, CommentWithReplies, PendingComment
from finetrack.domain.service.threading import sort_replies
from finetrack.domain.value import CommentId, CommentSort, TempCommentId

AnyComment = Comment | PendingComment


def contains_comment(
    comments: Sequence[AnyComment], comment_id: CommentId | TempCommentId
) -> bool:
    return any(c.id == comment_id for c in comments)


def replace_comment(comments: Sequence[AnyComment], comment: AnyComment) -> list:
    """Swap the row with the same id for ``comment``."""
    return [comment if c.id == comment.id else c for c in comments]


def insert_comment(
    comments: Sequence[AnyComment], comment: AnyComment, sort: CommentSort
) -> list:
    """Add a new row at the head of a flat list (tail for oldest-first lists).

    A row whose id is already present is replaced where it stands.
    """
    if contains_comment(comments, comment.id):
        return replace_comment(comments, comment)
    if sort is CommentSort.OLDEST:
        return [*comments, comment]
    return [comment, *comments]


def find_in_threads(
    threads: Sequence[CommentWithReplies], comment_id: CommentId | TempCommentId
) -> Optional[AnyComment]:
    """Find a root or reply by id."""
    for thread in threads:
        if thread.root.id == comment_id:
            return thread.root
        for reply in thread.replies:
            if reply.id == comment_id:
                return reply
    return None


def is_placeholder_for(
    entry: AnyComment, comment: Comment, window: timedelta
) -> bool:
    """Check whether ``entry`` is the pending stand-in for ``comment``.

    A placeholder matches when author, fine, parent and content agree and the
    two were created within ``window`` of each other.
    """
    return (
        entry.is_pending
        and entry.author_id == comment.author_id
        and entry.fine_id == comment.fine_id
        and entry.parent_id == comment.parent_id
        and entry.content == comment.content
        and abs(comment.created_at - entry.created_at) <= window
    )


def replace_in_threads(
    threads: Sequence[CommentWithReplies], comment: AnyComment
) -> list[CommentWithReplies]:
    """Replace a root or reply by id, recomputing the owning thread's reply count."""
    result = []
    for thread in threads:
        if thread.root.id == comment.id:
            thread = thread.with_root(comment)
        elif contains_comment(thread.replies, comment.id):
            thread = thread.with_replies(replace_comment(thread.replies, comment))
        result.append(thread)
    return result


def insert_into_threads(
    threads: Sequence[CommentWithReplies],
    comment: AnyComment,
    sort: CommentSort,
    placeholder_window: Optional[timedelta] = None,
) -> Optional[list[CommentWithReplies]]:
    """Add a comment to a threaded view.

    Roots become a new thread at the head (tail for oldest-first views).
    Replies join their root's replies in chronological order. A confirmed
    comment takes the place of its pending placeholder when one is present,
    and a comment whose id is already present replaces the old copy.

    Returns:
        The new threads, or None when a reply's root is not in the view
    """
    threads = list(threads)

    if find_in_threads(threads, comment.id) is not None:
        return replace_in_threads(threads, comment)

    match_placeholder = placeholder_window is not None and not comment.is_pending

    if comment.parent_id is None:
        if match_placeholder:
            for i, thread in enumerate(threads):
                if is_placeholder_for(thread.root, comment, placeholder_window):
                    threads[i] = thread.with_root(comment)
                    return threads

        new_thread = CommentWithReplies.build(comment)
        if sort is CommentSort.OLDEST:
            return [*threads, new_thread]
        return [new_thread, *threads]

    for i, thread in enumerate(threads):
        if thread.root.id != comment.parent_id:
            continue

        replies = list(thread.replies)
        placeholder_index = next(
            (
                j
                for j, reply in enumerate(replies)
                if match_placeholder
                and is_placeholder_for(reply, comment, placeholder_window)
            ),
            None,
        )
        if placeholder_index is None:
            replies.append(comment)
        else:
            replies[placeholder_index] = comment

        threads[i] = thread.with_replies(sort_replies(replies))
        return threads

    return None
