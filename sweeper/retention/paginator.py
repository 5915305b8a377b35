"""
Retention Sweeper - History Paginator
=====================================

Walks a channel's message history from newest to oldest.

DESIGN:
    Discord returns at most 100 messages per request, newest first. Each
    page's oldest message becomes the cursor and the next request asks for
    messages strictly before it. The walk ends on the first empty page, so
    a channel with N messages costs ceil(N / 100) + 1 requests.

    Snowflake ids grow with creation time, so a well-behaved service
    always returns ids below the cursor, decreasing within the page. If
    it ever does not, ids at or above the cursor and repeats within the
    page are dropped and logged, and the rest is re-sorted newest first.
    Only the current page needs a seen-set since the cursor already
    excludes everything yielded before it.
"""

from typing import AsyncIterator, List, Optional, Set

from sweeper.core.constants import HISTORY_PAGE_SIZE
from sweeper.core.logger import logger
from sweeper.core.models import Message
from sweeper.services.directory import DirectoryService


class HistoryPaginator:
    """
    Lazily pages through channel history.

    Attributes:
        service: Directory used for the history requests.
        page_size: Messages requested per page.
    """

    def __init__(self, service: DirectoryService, page_size: int = HISTORY_PAGE_SIZE) -> None:
        self.service = service
        self.page_size = page_size

    async def pages(self, channel_id: int) -> AsyncIterator[List[Message]]:
        """
        Yield pages of messages, newest first, in strictly decreasing id order.

        Raises:
            ServiceError: Propagated from the first failing request.
        """
        cursor: Optional[int] = None

        while True:
            raw_page = await self.service.list_messages(
                channel_id,
                limit=self.page_size,
                before_id=cursor,
            )
            if not raw_page:
                return

            page = self._clean_page(channel_id, raw_page, cursor)
            if not page:
                # Nothing new below the cursor; another request would repeat this one.
                logger.warning("History Page Ignored", [
                    ("Channel ID", str(channel_id)),
                    ("Cursor", str(cursor)),
                    ("Returned", str(len(raw_page))),
                ])
                return

            cursor = page[-1].id
            yield page

    async def paginate(self, channel_id: int) -> AsyncIterator[Message]:
        """Yield every message in the channel, newest first."""
        async for page in self.pages(channel_id):
            for message in page:
                yield message

    def _clean_page(
        self,
        channel_id: int,
        page: List[Message],
        cursor: Optional[int],
    ) -> List[Message]:
        kept: List[Message] = []
        seen: Set[int] = set()

        for message in page:
            if cursor is not None and message.id >= cursor:
                continue
            if message.id in seen:
                continue
            seen.add(message.id)
            kept.append(message)

        dropped = len(page) - len(kept)
        if dropped:
            logger.warning("History Ordering Violation", [
                ("Channel ID", str(channel_id)),
                ("Dropped", str(dropped)),
                ("Kept", str(len(kept))),
            ])

        kept.sort(key=lambda message: message.id, reverse=True)
        return kept


__all__ = ["HistoryPaginator"]
