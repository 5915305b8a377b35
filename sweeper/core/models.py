"""
Retention Sweeper - Data Models
===============================

Snapshots of remote objects and the retention configuration.

DESIGN:
    Guild, Channel and Message are frozen snapshots fetched fresh every
    cycle and dropped afterwards. Nothing is cached between sweeps.

    RetentionConfig is built once at startup and shared read-only by
    every sweep. It wraps a MappingProxyType so no caller can mutate it.
"""

from collections import abc
from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple


# =============================================================================
# Remote Snapshots
# =============================================================================

@dataclass(frozen=True)
class Guild:
    """A guild visible to the credential."""

    id: int
    name: str


@dataclass(frozen=True)
class Channel:
    """A message-bearing channel inside a guild."""

    id: int
    name: str
    guild_id: int


@dataclass(frozen=True)
class Message:
    """
    A single message in a channel's history.

    Attributes:
        id: Snowflake id, increases with creation time.
        timestamp: Creation time, timezone-aware.
        channel_id: Channel the message lives in.
        pinned: Whether the message is pinned.
    """

    id: int
    timestamp: datetime
    channel_id: int
    pinned: bool = False


# =============================================================================
# Retention Configuration
# =============================================================================

@dataclass(frozen=True)
class RetentionRule:
    """Maximum message age for one channel name."""

    channel_name: str
    max_age: timedelta

    def __post_init__(self) -> None:
        if self.max_age <= timedelta(0):
            raise ValueError(f"max_age must be positive for #{self.channel_name}")


class RetentionConfig(abc.Mapping):
    """
    Read-only mapping of channel name to RetentionRule.

    Lookups are exact, case-sensitive name matches. Channels without a
    rule are never swept.

    Attributes:
        overridden: Names that appeared more than once in the source
            string, where the last entry won.
    """

    def __init__(
        self,
        rules: Dict[str, RetentionRule],
        overridden: Tuple[str, ...] = (),
    ) -> None:
        self._rules: Mapping[str, RetentionRule] = MappingProxyType(dict(rules))
        self.overridden: Tuple[str, ...] = tuple(overridden)

    def __getitem__(self, channel_name: str) -> RetentionRule:
        return self._rules[channel_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def rule_for(self, channel_name: str) -> Optional[RetentionRule]:
        """Return the rule for a channel name, or None if it is unmonitored."""
        return self._rules.get(channel_name)

    def __repr__(self) -> str:
        return f"RetentionConfig({dict(self._rules)!r})"


__all__ = [
    "Guild",
    "Channel",
    "Message",
    "RetentionRule",
    "RetentionConfig",
]
