"""Assembly of flat comment lists into two-level threads."""

from collections import defaultdict
from typing import Iterable

from finetrack.domain.model.comment import Comment, CommentWithReplies, PendingComment
from finetrack.domain.value import CommentSort


def sort_replies(replies: Iterable[Comment | PendingComment]) -> list:
    """Replies are always shown oldest first, whatever the root order."""
    return sorted(replies, key=lambda r: r.created_at)


def sort_threads(
    threads: Iterable[CommentWithReplies], sort: CommentSort
) -> list[CommentWithReplies]:
    """Order threads by root creation time or, for THREAD, by latest activity.

    Sorting is stable, so equal keys keep their input order.
    """
    if sort is CommentSort.OLDEST:
        return sorted(threads, key=lambda t: t.root.created_at)
    if sort is CommentSort.NEWEST:
        return sorted(threads, key=lambda t: t.root.created_at, reverse=True)
    return sorted(threads, key=lambda t: t.latest_activity, reverse=True)


def assemble_threads(
    comments: Iterable[Comment | PendingComment],
    sort: CommentSort = CommentSort.THREAD,
) -> list[CommentWithReplies]:
    """Partition a fine's comments into root comments with attached replies.

    Replies whose root is not in ``comments`` are dropped. The result depends
    only on the input and ``sort``.

    Args:
        comments: Flat list of a fine's comments, in any order
        sort: Root ordering

    Returns:
        Threads ordered by ``sort``, each with replies oldest first
    """
    roots: list[Comment | PendingComment] = []
    replies_by_parent: dict = defaultdict(list)

    for comment in comments:
        if comment.parent_id is None:
            roots.append(comment)
        else:
            replies_by_parent[comment.parent_id].append(comment)

    threads = [
        CommentWithReplies.build(root, sort_replies(replies_by_parent.get(root.id, [])))
        for root in roots
    ]
    return sort_threads(threads, sort)
