"""
Retention Sweeper - Message Filter
==================================

Decides which messages have outlived their channel's retention.
"""

from datetime import datetime, timedelta
from typing import Iterable, Set

from sweeper.core.models import Message


def is_stale(message: Message, max_age: timedelta, now: datetime) -> bool:
    """A message exactly ``max_age`` old is still retained."""
    return now - message.timestamp > max_age


def filter_stale(
    messages: Iterable[Message],
    max_age: timedelta,
    now: datetime,
    delete_pinned: bool = False,
) -> Set[int]:
    """
    Return the ids of messages older than ``max_age`` at ``now``.

    Args:
        messages: Candidate messages from one channel.
        max_age: The channel's retention threshold.
        now: Reference time, timezone-aware.
        delete_pinned: When False, pinned messages are never stale.

    Returns:
        Set of stale message ids.
    """
    return {
        message.id
        for message in messages
        if (delete_pinned or not message.pinned) and is_stale(message, max_age, now)
    }


__all__ = ["is_stale", "filter_stale"]
