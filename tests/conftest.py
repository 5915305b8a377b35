"""
Retention Sweeper - Test Fixtures
=================================

Shared fixtures for all tests: a fixed clock and an in-memory directory
service standing in for Discord.
"""

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep test log files out of the working tree; must happen before any
# sweeper import because the logger creates its folder at import time.
os.environ.setdefault("SWEEPER_LOG_DIR", tempfile.mkdtemp(prefix="sweeper-test-logs-"))

from sweeper.core.errors import NotFound, ServiceError  # noqa: E402
from sweeper.core.models import Channel, Guild, Message  # noqa: E402


NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# In-Memory Directory
# =============================================================================

class FakeDirectory:
    """
    DirectoryService backed by dictionaries.

    Failures are injected per call site with fail(), keyed by the method
    name and the id it targets (guild id, channel id or message id).
    """

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now
        self.guilds: Dict[int, Guild] = {}
        self.channels: Dict[int, List[Channel]] = {}
        self.messages: Dict[int, Dict[int, Message]] = {}
        self.deleted: List[Tuple[int, int]] = []
        self.list_guild_calls: List[Tuple[Optional[int], int]] = []
        self.list_message_calls: List[Tuple[int, Optional[int]]] = []
        self.delete_calls: List[Tuple[int, int]] = []
        self._failures: Dict[Tuple[str, Optional[int]], ServiceError] = {}

    # -------------------------------------------------------------------------
    # Setup helpers
    # -------------------------------------------------------------------------

    def add_guild(self, guild_id: int, name: str) -> Guild:
        guild = Guild(id=guild_id, name=name)
        self.guilds[guild_id] = guild
        self.channels.setdefault(guild_id, [])
        return guild

    def add_channel(self, guild_id: int, channel_id: int, name: str) -> Channel:
        channel = Channel(id=channel_id, name=name, guild_id=guild_id)
        self.channels[guild_id].append(channel)
        self.messages.setdefault(channel_id, {})
        return channel

    def add_message(
        self,
        channel_id: int,
        message_id: int,
        age: timedelta,
        pinned: bool = False,
    ) -> Message:
        message = Message(
            id=message_id,
            timestamp=self.now - age,
            channel_id=channel_id,
            pinned=pinned,
        )
        self.messages.setdefault(channel_id, {})[message_id] = message
        return message

    def fill_channel(self, channel_id: int, count: int, first_id: int = 1000) -> None:
        """Add ``count`` messages, one minute apart, the newest one minute old."""
        for offset in range(count):
            self.add_message(
                channel_id,
                first_id + offset,
                age=timedelta(minutes=count - offset),
            )

    def fail(self, method: str, target: Optional[int], error: ServiceError) -> None:
        self._failures[(method, target)] = error

    def _check(self, method: str, target: Optional[int]) -> None:
        error = self._failures.get((method, target))
        if error is not None:
            raise error

    # -------------------------------------------------------------------------
    # DirectoryService
    # -------------------------------------------------------------------------

    async def list_guilds(self, after_id: Optional[int], limit: int) -> List[Guild]:
        self.list_guild_calls.append((after_id, limit))
        self._check("list_guilds", None)
        ordered = sorted(self.guilds.values(), key=lambda g: g.id)
        if after_id is not None:
            ordered = [g for g in ordered if g.id > after_id]
        return ordered[:limit]

    async def list_channels(self, guild_id: int) -> List[Channel]:
        self._check("list_channels", guild_id)
        return list(self.channels.get(guild_id, []))

    async def list_messages(
        self,
        channel_id: int,
        *,
        limit: int,
        before_id: Optional[int] = None,
    ) -> List[Message]:
        self.list_message_calls.append((channel_id, before_id))
        self._check("list_messages", channel_id)
        ordered = sorted(self.messages.get(channel_id, {}).values(), key=lambda m: m.id, reverse=True)
        if before_id is not None:
            ordered = [m for m in ordered if m.id < before_id]
        return ordered[:limit]

    async def delete_message(self, channel_id: int, message_id: int) -> None:
        self.delete_calls.append((channel_id, message_id))
        self._check("delete_message", message_id)
        channel = self.messages.get(channel_id, {})
        if message_id not in channel:
            raise NotFound("Delete message", "Unknown Message")
        del channel[message_id]
        self.deleted.append((channel_id, message_id))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def now():
    """The fixed reference time every test clock returns."""
    return NOW


@pytest.fixture
def clock():
    """A clock callable frozen at NOW."""
    return lambda: NOW


@pytest.fixture
def directory():
    """An empty in-memory directory."""
    return FakeDirectory()


@pytest.fixture
def make_message():
    """Factory for standalone messages aged relative to NOW."""

    def _make(message_id: int, age: timedelta, pinned: bool = False, channel_id: int = 1) -> Message:
        return Message(id=message_id, timestamp=NOW - age, channel_id=channel_id, pinned=pinned)

    return _make
