"""
Retention Sweeper - Directory & History Service Protocol
========================================================

The remote collaborator the retention engine talks to.

DESIGN:
    The engine only needs four calls: list guilds, list channels, read a
    page of history, and delete one message. Keeping them behind a
    Protocol lets the coordinator receive its client at construction
    time and lets tests swap in an in-memory directory.

    Every method raises a ServiceError subclass on failure, never a
    transport library's own exception type.
"""

from typing import List, Optional, Protocol

from sweeper.core.models import Channel, Guild, Message


class DirectoryService(Protocol):
    """Read and delete access to guilds, channels and message history."""

    async def list_guilds(self, after_id: Optional[int], limit: int) -> List[Guild]:
        """Return up to ``limit`` guilds with ids above ``after_id``, ascending."""
        ...

    async def list_channels(self, guild_id: int) -> List[Channel]:
        """Return the message-bearing channels of a guild."""
        ...

    async def list_messages(
        self,
        channel_id: int,
        *,
        limit: int,
        before_id: Optional[int] = None,
    ) -> List[Message]:
        """Return up to ``limit`` messages older than ``before_id``, newest first."""
        ...

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        """Delete one message. Raises NotFound if it is already gone."""
        ...


__all__ = ["DirectoryService"]
