"""
Retention Sweeper - Discord Directory Service
=============================================

DirectoryService implementation backed by discord.py's HTTP client.

DESIGN:
    The sweeper never needs a gateway connection. Client.login() sets up
    the authenticated HTTP session and validates the token, after which
    the REST routes are called directly through client.http and the raw
    payloads are mapped into our own frozen models.

    discord.py already waits out 429 responses internally. Whatever it
    cannot absorb, along with every other failure, is translated into the
    sweeper's ServiceError taxonomy here so nothing above this module
    ever sees a discord.py or aiohttp exception.
"""

import asyncio
from typing import Any, Awaitable, Dict, List, Optional, TypeVar

import aiohttp
import discord

from sweeper.core.constants import MESSAGE_CHANNEL_TYPES
from sweeper.core.errors import Forbidden, NotFound, RateLimited, TransportError
from sweeper.core.logger import logger
from sweeper.core.models import Channel, Guild, Message

T = TypeVar("T")


# =============================================================================
# Payload Mapping
# =============================================================================

def guild_from_payload(data: Dict[str, Any]) -> Guild:
    return Guild(id=int(data["id"]), name=data.get("name", ""))


def channel_from_payload(data: Dict[str, Any], guild_id: int) -> Channel:
    return Channel(id=int(data["id"]), name=data.get("name", ""), guild_id=guild_id)


def message_from_payload(data: Dict[str, Any]) -> Message:
    """Map a raw message payload, using its ISO-8601 creation timestamp."""
    return Message(
        id=int(data["id"]),
        timestamp=discord.utils.parse_time(data["timestamp"]),
        channel_id=int(data["channel_id"]),
        pinned=bool(data.get("pinned", False)),
    )


# =============================================================================
# Discord Directory
# =============================================================================

class DiscordDirectory:
    """
    Directory & History Service for a Discord bot token.

    Attributes:
        client: The logged-in discord.py client owning the HTTP session.
    """

    def __init__(self, client: discord.Client) -> None:
        self.client = client
        self._http = client.http

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @classmethod
    async def login(cls, token: str) -> "DiscordDirectory":
        """
        Create a client and authenticate it over HTTP only.

        Raises:
            discord.LoginFailure: If the token is rejected.
        """
        client = discord.Client(intents=discord.Intents.none())
        await client.login(token)

        logger.tree("Discord Session Ready", [
            ("Bot", str(client.user) if client.user else "Unknown"),
            ("Mode", "HTTP only"),
        ], emoji="🔑")
        return cls(client)

    async def close(self) -> None:
        await self.client.close()

    # =========================================================================
    # Error Translation
    # =========================================================================

    async def _call(self, operation: str, request: Awaitable[T]) -> T:
        """Await a discord.py HTTP request, translating its failures."""
        try:
            return await request
        except discord.NotFound as e:
            raise NotFound(operation, e.text or None) from e
        except discord.Forbidden as e:
            raise Forbidden(operation, e.text or None) from e
        except discord.RateLimited as e:
            raise RateLimited(operation, retry_after=e.retry_after) from e
        except discord.HTTPException as e:
            if e.status == 429:
                raise RateLimited(operation, e.text or None) from e
            raise TransportError(operation, f"HTTP {e.status} {e.text}".strip()) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(operation, f"{type(e).__name__}: {e}") from e

    # =========================================================================
    # DirectoryService
    # =========================================================================

    async def list_guilds(self, after_id: Optional[int], limit: int) -> List[Guild]:
        data = await self._call(
            "List guilds",
            self._http.get_guilds(limit, after=after_id),
        )
        return [guild_from_payload(item) for item in data]

    async def list_channels(self, guild_id: int) -> List[Channel]:
        data = await self._call(
            "List channels",
            self._http.get_all_guild_channels(guild_id),
        )
        return [
            channel_from_payload(item, guild_id)
            for item in data
            if item.get("type") in MESSAGE_CHANNEL_TYPES
        ]

    async def list_messages(
        self,
        channel_id: int,
        *,
        limit: int,
        before_id: Optional[int] = None,
    ) -> List[Message]:
        data = await self._call(
            "List messages",
            self._http.logs_from(channel_id, limit, before=before_id),
        )
        return [message_from_payload(item) for item in data]

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        await self._call(
            "Delete message",
            self._http.delete_message(channel_id, message_id),
        )


__all__ = [
    "DiscordDirectory",
    "guild_from_payload",
    "channel_from_payload",
    "message_from_payload",
]
