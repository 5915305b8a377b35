"""
Tests for sweeper/retention/paginator.py
"""

import math
from datetime import timedelta
from typing import List, Optional

import pytest

from sweeper.core.errors import TransportError
from sweeper.core.models import Message
from sweeper.retention.filter import filter_stale
from sweeper.retention.paginator import HistoryPaginator


async def collect(paginator: HistoryPaginator, channel_id: int) -> List[Message]:
    return [message async for message in paginator.paginate(channel_id)]


class TestPaginate:
    """Tests for HistoryPaginator.paginate."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 1, 99, 100, 101, 250, 300])
    async def test_call_count_and_order(self, directory, count):
        directory.add_guild(1, "guild")
        directory.add_channel(1, 10, "general")
        directory.fill_channel(10, count)

        messages = await collect(HistoryPaginator(directory), 10)

        assert len(directory.list_message_calls) == math.ceil(count / 100) + 1
        assert len(messages) == count
        ids = [m.id for m in messages]
        assert len(set(ids)) == count
        assert all(a > b for a, b in zip(ids, ids[1:]))

    @pytest.mark.asyncio
    async def test_first_page_has_no_cursor(self, directory):
        directory.fill_channel(10, 5)
        await collect(HistoryPaginator(directory), 10)

        assert directory.list_message_calls[0] == (10, None)

    @pytest.mark.asyncio
    async def test_cursor_is_oldest_id_of_previous_page(self, directory):
        directory.fill_channel(10, 250, first_id=1)

        await collect(HistoryPaginator(directory), 10)

        cursors = [before for _, before in directory.list_message_calls]
        assert cursors == [None, 151, 51, 1]

    @pytest.mark.asyncio
    async def test_custom_page_size(self, directory):
        directory.fill_channel(10, 7)
        paginator = HistoryPaginator(directory, page_size=3)

        pages = [page async for page in paginator.pages(10)]

        assert [len(p) for p in pages] == [3, 3, 1]
        assert len(directory.list_message_calls) == 4

    @pytest.mark.asyncio
    async def test_is_lazy(self, directory):
        directory.fill_channel(10, 250)
        pages = HistoryPaginator(directory).pages(10)

        first = await pages.__anext__()
        await pages.aclose()

        assert len(first) == 100
        assert len(directory.list_message_calls) == 1

    @pytest.mark.asyncio
    async def test_error_propagates(self, directory):
        directory.fail("list_messages", 10, TransportError("List messages", "boom"))

        with pytest.raises(TransportError):
            await collect(HistoryPaginator(directory), 10)


class CannedDirectory:
    """Returns canned pages of ids in order, ignoring the cursor."""

    def __init__(self, pages: List[List[int]], now) -> None:
        self._pages = pages
        self._now = now
        self.calls: List[Optional[int]] = []

    async def list_messages(self, channel_id, *, limit, before_id=None):
        self.calls.append(before_id)
        index = len(self.calls) - 1
        ids = self._pages[index] if index < len(self._pages) else []
        return [
            Message(id=i, timestamp=self._now - timedelta(minutes=i), channel_id=channel_id)
            for i in ids
        ]


class TestOrderingDefence:
    """The paginator must never loop or repeat when ordering is violated."""

    @pytest.mark.asyncio
    async def test_drops_repeats_and_ids_above_cursor(self, now):
        service = CannedDirectory([[10, 9, 12, 9, 8], [7, 8, 6]], now)

        messages = await collect(HistoryPaginator(service), 1)

        assert [m.id for m in messages] == [12, 10, 9, 8, 7, 6]
        assert service.calls == [None, 8, 6]

    @pytest.mark.asyncio
    async def test_shuffled_page_is_fully_visited(self, now):
        service = CannedDirectory([[3, 5, 4]], now)

        messages = await collect(HistoryPaginator(service), 1)

        assert [m.id for m in messages] == [5, 4, 3]
        assert service.calls == [None, 3]

    @pytest.mark.asyncio
    async def test_shuffled_page_is_swept(self, now):
        service = CannedDirectory([[3, 5, 4]], now)
        messages = await collect(HistoryPaginator(service), 1)

        stale = filter_stale(messages, timedelta(minutes=1), now)

        assert stale == {3, 4, 5}

    @pytest.mark.asyncio
    async def test_stops_when_cursor_does_not_advance(self, now):
        service = CannedDirectory([[5, 4], [5, 4], [5, 4]], now)

        messages = await collect(HistoryPaginator(service), 1)

        assert [m.id for m in messages] == [5, 4]
        assert service.calls == [None, 4]
