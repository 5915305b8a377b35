"""
Retention Sweeper - Deletion Executor
=====================================

Deletes stale messages one request at a time.

DESIGN:
    Discord's bulk-delete route refuses messages older than 14 days, which
    is exactly what a retention sweep targets, so every message gets its
    own DELETE request.

    - NotFound counts as success: another sweep (or a human) got there
      first, and treating it as a failure would break idempotence.
    - Any other ServiceError stops the channel for this cycle. Messages
      already deleted stay deleted; the rest are retried next cycle.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from sweeper.core.constants import LOG_ID_PREVIEW
from sweeper.core.errors import NotFound, ServiceError
from sweeper.core.logger import logger
from sweeper.services.directory import DirectoryService


# =============================================================================
# Result
# =============================================================================

@dataclass
class DeletionResult:
    """
    Outcome of deleting one channel's stale messages.

    Attributes:
        channel_id: Channel the deletions targeted.
        requested: Number of ids handed to the executor.
        deleted: Messages actually removed by this run.
        already_gone: Deletions answered with NotFound.
        skipped: Ids left untouched (dry run or after a failure).
        error: The failure that aborted the channel, if any.
    """

    channel_id: int
    requested: int = 0
    deleted: int = 0
    already_gone: int = 0
    skipped: int = 0
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Executor
# =============================================================================

class DeletionExecutor:
    """
    Sequential per-message deleter.

    Attributes:
        service: Directory used for the delete requests.
        dry_run: When True, candidates are logged and nothing is deleted.
    """

    def __init__(self, service: DirectoryService, dry_run: bool = False) -> None:
        self.service = service
        self.dry_run = dry_run

    async def delete_all(self, channel_id: int, ids: Iterable[int]) -> DeletionResult:
        """
        Delete every id in ``ids`` from the channel.

        Args:
            channel_id: Channel holding the messages.
            ids: Message ids to delete. Order is not significant.

        Returns:
            DeletionResult. ``error`` holds the first non-NotFound failure.
        """
        pending = sorted(ids)
        result = DeletionResult(channel_id=channel_id, requested=len(pending))

        if self.dry_run:
            result.skipped = len(pending)
            if pending:
                preview = ", ".join(str(i) for i in pending[:LOG_ID_PREVIEW])
                if len(pending) > LOG_ID_PREVIEW:
                    preview += ", ..."
                logger.tree("Dry Run Candidates", [
                    ("Channel ID", str(channel_id)),
                    ("Count", str(len(pending))),
                    ("IDs", preview),
                ], emoji="🔎")
            return result

        for index, message_id in enumerate(pending):
            try:
                await self.service.delete_message(channel_id, message_id)
            except NotFound:
                result.already_gone += 1
                continue
            except ServiceError as e:
                result.error = e
                result.skipped = len(pending) - index
                break
            result.deleted += 1

        return result


__all__ = ["DeletionResult", "DeletionExecutor"]
