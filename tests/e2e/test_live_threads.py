"""End-to-end thread scenarios across the service, the cache and the push channel.

Writes go through the comment service; the in-memory push channel stands in
for the database trigger and is published to after every committed write.
"""

import pytest

from finetrack.adapter.realtime import (
    CommentChange,
    CommentChangeKind,
    InMemoryPushChannel,
)
from finetrack.application.sync import (
    CommentKeys,
    CommentQueries,
    LiveCommentUpdates,
    OptimisticCommentWriter,
)
from finetrack.domain.error import ForbiddenError, InvalidThreadError
from finetrack.domain.repository import FineRepository, UserRepository
from finetrack.domain.service import CommentService, StaticAuthSession
from finetrack.domain.value import CreateCommentInput, UpdateCommentInput
from tests.conftest import make_fine, make_user
from tests.harness import create_env_fixture

e2e_env = create_env_fixture()


class TestReplyThreadScenario:
    """A root from one user, a pushed reply from another, then a rejected reply."""

    @pytest.mark.asyncio
    async def test_root_reply_and_rejected_nested_reply(self, e2e_env):
        # Arrange
        session = await e2e_env.get(StaticAuthSession)
        users = await e2e_env.get(UserRepository)
        alice, bob = make_user("Alice Example"), make_user("Bob Builder")
        await users.save(alice)
        await users.save(bob)
        fine = await (await e2e_env.get(FineRepository)).save(make_fine())

        queries = await e2e_env.get(CommentQueries)
        writer = await e2e_env.get(OptimisticCommentWriter)
        live = await e2e_env.get(LiveCommentUpdates)
        channel = await e2e_env.get(InMemoryPushChannel)
        service = await e2e_env.get(CommentService)

        assert await queries.threaded(fine.id) == []
        assert await queries.count(fine.id) == 0
        await live.start(fine.id)

        # Act: Alice posts a root comment
        session.sign_in(alice)
        root = await writer.submit(
            CreateCommentInput(fine_id=fine.id, content="Nice catch")
        )
        threads = await queries.threaded(fine.id)
        count = await queries.count(fine.id)

        # Assert
        assert len(threads) == 1
        assert threads[0].root.id == root.id
        assert threads[0].replies == []
        assert count == 1

        # Act: Bob replies from elsewhere; the change arrives by push
        session.sign_in(bob)
        reply = await service.create_comment(
            CreateCommentInput(fine_id=fine.id, content="Agreed", parent_id=root.id)
        )
        channel.publish(CommentChange(kind=CommentChangeKind.INSERT, comment=reply))

        # Assert: served from the patched cache without a refetch
        threaded_entry = queries.cache.read(CommentKeys.threaded(fine.id))
        assert not threaded_entry.is_stale
        thread = threaded_entry.data[0]
        assert [r.content for r in thread.replies] == ["Agreed"]
        assert thread.reply_count == 1
        assert await queries.count(fine.id) == 2

        # Act & Assert: Alice tries to reply to Bob's reply
        session.sign_in(alice)
        with pytest.raises(InvalidThreadError):
            await writer.submit(
                CreateCommentInput(fine_id=fine.id, content="Me too", parent_id=reply.id)
            )

        assert await queries.count(fine.id) == 2
        assert await queries.count(fine.id, refetch=True) == 2
        threads = await queries.threaded(fine.id, refetch=True)
        assert len(threads) == 1
        assert len(threads[0].replies) == 1

        live.stop()


class TestEditScenario:
    """Author edits go through; edits by anyone else change nothing."""

    @pytest.mark.asyncio
    async def test_author_edit_and_rejected_non_author_edit(self, e2e_env):
        # Arrange
        session = await e2e_env.get(StaticAuthSession)
        users = await e2e_env.get(UserRepository)
        author, other = make_user("Alice Example"), make_user("Carol Other")
        await users.save(author)
        await users.save(other)
        fine = await (await e2e_env.get(FineRepository)).save(make_fine())
        service = await e2e_env.get(CommentService)
        queries = await e2e_env.get(CommentQueries)
        live = await e2e_env.get(LiveCommentUpdates)
        channel = await e2e_env.get(InMemoryPushChannel)

        session.sign_in(author)
        original = await service.create_comment(
            CreateCommentInput(fine_id=fine.id, content="typo fix needed")
        )
        await queries.comments(fine.id)
        await live.start(fine.id)

        # Act: the author edits
        edited = await service.update_comment(
            original.id, UpdateCommentInput(content="typo fixed")
        )
        channel.publish(CommentChange(kind=CommentChangeKind.UPDATE, comment=edited))

        # Assert
        assert edited.is_edited is True
        assert edited.content == "typo fixed"
        assert edited.updated_at > original.updated_at
        cached = await queries.comments(fine.id)
        assert cached == [edited]

        # Act & Assert: someone else tries the same edit
        session.sign_in(other)
        with pytest.raises(ForbiddenError):
            await service.update_comment(
                original.id, UpdateCommentInput(content="typo fixed again")
            )

        assert (await service.get_comment(original.id)) == edited
        live.stop()
