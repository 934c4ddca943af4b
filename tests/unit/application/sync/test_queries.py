"""Unit tests for CommentQueries and CommentMutations."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from finetrack.application.sync import (
    FINES_KEY,
    CacheStatus,
    CommentKeys,
    CommentMutations,
    CommentQueries,
    QueryCache,
)
from finetrack.application.sync.queries import is_fresh
from finetrack.config import SyncSettings
from finetrack.domain.error import NotFoundError, TransientStoreError
from finetrack.domain.repository import CommentRepository, FineRepository, UserRepository
from finetrack.domain.service import StaticAuthSession
from finetrack.domain.value import (
    CommentFilters,
    CommentSort,
    CreateCommentInput,
    UpdateCommentInput,
)
from tests.conftest import at, make_comment, make_fine, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _seeded(env):
    """Fine with a root and a reply by a signed-in author."""
    user = make_user()
    await (await env.get(UserRepository)).save(user)
    (await env.get(StaticAuthSession)).sign_in(user)

    fine = await (await env.get(FineRepository)).save(make_fine(comment_count=2))
    comment_repo = await env.get(CommentRepository)
    root = await comment_repo.save(make_comment(fine.id, user, "Root", created_at=at(0)))
    reply = await comment_repo.save(
        make_comment(fine.id, user, "Reply", parent_id=root.id, created_at=at(1))
    )
    return fine, root, reply


class TestCommentQueries:
    """Tests for cached reads."""

    @pytest.mark.asyncio
    async def test_comments_are_cached_until_invalidated(self, unit_env):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        comment_repo = await unit_env.get(CommentRepository)

        # Act
        first = await queries.comments(fine.id)
        await comment_repo.save(make_comment(fine.id, created_at=at(2)))
        cached = await queries.comments(fine.id)
        queries.invalidate_comments(fine.id)
        refetched = await queries.comments(fine.id)

        # Assert
        assert [c.id for c in first] == [reply.id, root.id]
        assert cached is first
        assert len(refetched) == 3
        assert is_fresh(cache.read(CommentKeys.list(fine.id)))

    @pytest.mark.asyncio
    async def test_filtered_queries_use_separate_keys(self, unit_env):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)

        # Act
        roots = await queries.comments(fine.id, CommentFilters(roots_only=True))
        everything = await queries.comments(fine.id, sort=CommentSort.OLDEST)

        # Assert
        assert [c.id for c in roots] == [root.id]
        assert [c.id for c in everything] == [root.id, reply.id]
        assert len(cache.keys(CommentKeys.fine_lists(fine.id))) == 2

    @pytest.mark.asyncio
    async def test_threaded_count_detail_and_recent(self, unit_env):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        fine, root, reply = await _seeded(unit_env)

        # Act
        threads = await queries.threaded(fine.id)
        count = await queries.count(fine.id)
        detail = await queries.detail(reply.id)
        recent = await queries.recent()

        # Assert
        assert threads[0].root.id == root.id
        assert threads[0].reply_count == 1
        assert count == 2
        assert detail == reply
        assert [c.id for c in recent] == [reply.id, root.id]

    @pytest.mark.asyncio
    async def test_failed_fetch_records_error(self, unit_env, monkeypatch):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        await queries.count(fine.id)
        queries.invalidate_comments(fine.id)
        error = TransientStoreError("network down")
        monkeypatch.setattr(
            queries.comment_service, "count_comments", AsyncMock(side_effect=error)
        )

        # Act & Assert
        with pytest.raises(TransientStoreError):
            await queries.count(fine.id)

        entry = cache.read(CommentKeys.count(fine.id))
        assert entry.status is CacheStatus.ERROR
        assert entry.error is error
        assert entry.data == 2

    @pytest.mark.asyncio
    async def test_missing_detail_records_error(self, unit_env):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        missing = make_comment(make_fine().id)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await queries.detail(missing.id)

        assert cache.read(CommentKeys.detail(missing.id)).status is CacheStatus.ERROR

    @pytest.mark.asyncio
    async def test_entry_is_loading_during_fetch(self, unit_env, monkeypatch):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        statuses = []

        async def observing_count(fine_id):
            statuses.append(cache.read(CommentKeys.count(fine_id)).status)
            return 2

        monkeypatch.setattr(queries.comment_service, "count_comments", observing_count)

        # Act
        await queries.count(fine.id)

        # Assert
        assert statuses == [CacheStatus.LOADING]
        assert cache.read(CommentKeys.count(fine.id)).status is CacheStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_slow_fetch_times_out(self, unit_env, monkeypatch):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        queries.settings = SyncSettings(request_timeout=0.01)

        async def never_settles(fine_id):
            await asyncio.sleep(10)

        monkeypatch.setattr(queries.comment_service, "count_comments", never_settles)

        # Act & Assert
        with pytest.raises(TransientStoreError):
            await queries.count(fine.id)

        assert cache.read(CommentKeys.count(fine.id)).status is CacheStatus.ERROR

    @pytest.mark.asyncio
    async def test_unexpected_failure_records_error(self, unit_env, monkeypatch):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        error = RuntimeError("driver bug")
        monkeypatch.setattr(
            queries.comment_service, "count_comments", AsyncMock(side_effect=error)
        )

        # Act & Assert
        with pytest.raises(RuntimeError):
            await queries.count(fine.id)

        entry = cache.read(CommentKeys.count(fine.id))
        assert entry.status is CacheStatus.ERROR
        assert entry.error is error

    @pytest.mark.asyncio
    async def test_cancelled_fetch_does_not_stay_loading(self, unit_env, monkeypatch):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        started = asyncio.Event()

        async def hanging_count(fine_id):
            started.set()
            await asyncio.sleep(10)

        monkeypatch.setattr(queries.comment_service, "count_comments", hanging_count)

        # Act
        task = asyncio.create_task(queries.count(fine.id))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        # Assert
        entry = cache.read(CommentKeys.count(fine.id))
        assert entry.status is CacheStatus.ERROR
        assert isinstance(entry.error, asyncio.CancelledError)

    @pytest.mark.asyncio
    async def test_invalidate_all_comments(self, unit_env):
        # Arrange
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        await queries.count(fine.id)
        await queries.recent()

        # Act
        queries.invalidate_comments()

        # Assert
        assert all(cache.read(k).is_stale for k in cache.keys(CommentKeys.all()))


class TestCommentMutations:
    """Tests for settle-time invalidation after writes."""

    @pytest.mark.asyncio
    async def test_create_invalidates_fine_views(self, unit_env):
        # Arrange
        mutations = await unit_env.get(CommentMutations)
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        await queries.comments(fine.id)
        await queries.threaded(fine.id)
        await queries.count(fine.id)
        cache.write(FINES_KEY, [fine])

        # Act
        await mutations.create(CreateCommentInput(fine_id=fine.id, content="New"))

        # Assert
        assert cache.read(CommentKeys.list(fine.id)).is_stale
        assert cache.read(CommentKeys.threaded(fine.id)).is_stale
        assert cache.read(CommentKeys.count(fine.id)).is_stale
        assert cache.read(FINES_KEY).is_stale
        assert await queries.count(fine.id) == 3

    @pytest.mark.asyncio
    async def test_update_writes_detail(self, unit_env):
        # Arrange
        mutations = await unit_env.get(CommentMutations)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)

        # Act
        updated = await mutations.update(root.id, UpdateCommentInput(content="Edited"))

        # Assert
        assert cache.get_data(CommentKeys.detail(root.id)) == updated
        assert updated.is_edited

    @pytest.mark.asyncio
    async def test_delete_writes_detail_and_invalidates_count(self, unit_env):
        # Arrange
        mutations = await unit_env.get(CommentMutations)
        queries = await unit_env.get(CommentQueries)
        cache = await unit_env.get(QueryCache)
        fine, root, reply = await _seeded(unit_env)
        await queries.count(fine.id)

        # Act
        deleted = await mutations.delete(reply.id)

        # Assert
        assert cache.get_data(CommentKeys.detail(reply.id)).is_deleted
        assert cache.read(CommentKeys.count(fine.id)).is_stale
        assert deleted.is_deleted
        assert await queries.count(fine.id) == 1
