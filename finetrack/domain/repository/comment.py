"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from finetrack.domain.model.comment import Comment
from finetrack.domain.value import CommentFilters, CommentId, CommentSort, FineId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID, deleted or not.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_fine(
        self,
        fine_id: FineId,
        filters: Optional[CommentFilters] = None,
        sort: CommentSort = CommentSort.NEWEST,
        limit: int = 100,
    ) -> List[Comment]:
        """Find the non-deleted comments of a fine.

        Sort orders:
        - NEWEST: created_at descending
        - OLDEST: created_at ascending
        - THREAD: grouped by thread (root first, then its replies oldest first)

        Args:
            fine_id: The fine ID
            filters: Optional author / parent / date / text filters
            sort: Sort order
            limit: Maximum number of comments to return

        Returns:
            List of comments
        """
        pass

    @abstractmethod
    async def find_thread_roots(
        self,
        fine_id: FineId,
        sort: CommentSort = CommentSort.THREAD,
        limit: int = 100,
    ) -> List[Comment]:
        """Find the non-deleted root comments of a fine, one per thread.

        Sort orders:
        - NEWEST: root created_at descending
        - OLDEST: root created_at ascending
        - THREAD: latest activity descending, where activity is the later of
          the root's creation and its newest non-deleted reply

        Args:
            fine_id: The fine ID
            sort: Thread order
            limit: Maximum number of threads to return

        Returns:
            List of root comments in thread order
        """
        pass

    @abstractmethod
    async def find_replies(self, root_ids: List[CommentId]) -> List[Comment]:
        """Find the non-deleted replies to the given roots, oldest first.

        Args:
            root_ids: Root comment IDs

        Returns:
            List of replies, across all given roots
        """
        pass

    @abstractmethod
    async def find_recent(self, limit: int = 10) -> List[Comment]:
        """Find the newest non-deleted comments across all fines.

        Args:
            limit: Maximum number of comments to return

        Returns:
            List of comments, newest first
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def count_by_fine(self, fine_id: FineId) -> int:
        """Count comments for a fine (excluding deleted).

        Args:
            fine_id: The fine ID

        Returns:
            Number of comments, roots and replies together
        """
        pass
