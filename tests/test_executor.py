"""
Tests for sweeper/retention/executor.py
"""

from datetime import timedelta

import pytest

from sweeper.core.errors import Forbidden, RateLimited, TransportError
from sweeper.retention.executor import DeletionExecutor


@pytest.fixture
def populated(directory):
    """Channel 10 holding messages 1..5, all a month old."""
    directory.add_guild(1, "guild")
    directory.add_channel(1, 10, "general")
    for message_id in range(1, 6):
        directory.add_message(10, message_id, timedelta(days=30))
    return directory


class TestDeleteAll:
    """Tests for DeletionExecutor.delete_all."""

    @pytest.mark.asyncio
    async def test_deletes_every_id(self, populated):
        result = await DeletionExecutor(populated).delete_all(10, {1, 2, 3})

        assert result.ok
        assert result.requested == 3
        assert result.deleted == 3
        assert sorted(m for _, m in populated.deleted) == [1, 2, 3]
        assert set(populated.messages[10]) == {4, 5}

    @pytest.mark.asyncio
    async def test_one_request_per_message(self, populated):
        await DeletionExecutor(populated).delete_all(10, {1, 2, 3, 4, 5})
        assert len(populated.delete_calls) == 5

    @pytest.mark.asyncio
    async def test_empty_ids(self, populated):
        result = await DeletionExecutor(populated).delete_all(10, set())

        assert result.ok
        assert result.requested == 0
        assert populated.delete_calls == []

    @pytest.mark.asyncio
    async def test_not_found_is_success(self, populated):
        result = await DeletionExecutor(populated).delete_all(10, {1, 99, 2})

        assert result.ok
        assert result.deleted == 2
        assert result.already_gone == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        RateLimited("Delete message", retry_after=5.0),
        Forbidden("Delete message", "Missing Permissions"),
        TransportError("Delete message", "HTTP 503"),
    ])
    async def test_first_failure_aborts_channel(self, populated, error):
        populated.fail("delete_message", 3, error)

        result = await DeletionExecutor(populated).delete_all(10, {1, 2, 3, 4, 5})

        assert not result.ok
        assert result.error is error
        assert result.deleted == 2
        assert result.skipped == 3
        # Ids are processed ascending, so 4 and 5 are never attempted.
        assert [m for _, m in populated.delete_calls] == [1, 2, 3]
        # No rollback of what was already deleted.
        assert set(populated.messages[10]) == {3, 4, 5}

    @pytest.mark.asyncio
    async def test_dry_run_deletes_nothing(self, populated):
        result = await DeletionExecutor(populated, dry_run=True).delete_all(10, {1, 2})

        assert result.ok
        assert result.deleted == 0
        assert result.skipped == 2
        assert populated.delete_calls == []
        assert len(populated.messages[10]) == 5
