"""
Retention Sweeper - Retention Rules Parser
==========================================

Turns the CHANNEL_RETENTION string into a RetentionConfig.

DESIGN:
    Grammar:  entry ("," entry)*   where   entry := name ":" duration

    Parsing is pure: no logging, no environment access. Duplicate channel
    names are legal and the last entry wins, but the overwritten names
    are recorded on the result so startup can warn the operator.
"""

from typing import Dict, List

from sweeper.core.errors import InvalidChannelConfig
from sweeper.core.models import RetentionConfig, RetentionRule
from sweeper.utils.duration import parse_retention_duration


def parse_channel_retention(value: str) -> RetentionConfig:
    """
    Parse a CHANNEL_RETENTION string.

    Args:
        value: Comma-separated ``name:duration`` entries,
            e.g. ``"general:7d,logs:2w"``.

    Returns:
        Immutable RetentionConfig keyed by channel name.

    Raises:
        InvalidChannelConfig: If an entry has no ``:``, has an empty
            channel name, or the value contains no entries at all.
        InvalidDuration: If a duration part is malformed.
    """
    rules: Dict[str, RetentionRule] = {}
    overridden: List[str] = []

    for raw_entry in value.split(","):
        entry = raw_entry.strip()
        if not entry:
            continue

        name, sep, duration = entry.partition(":")
        if not sep:
            raise InvalidChannelConfig(
                f"Invalid channel retention entry {entry!r}, expected 'name:duration'"
            )

        name = name.strip()
        if not name:
            raise InvalidChannelConfig(f"Missing channel name in entry {entry!r}")

        max_age = parse_retention_duration(duration)

        if name in rules and name not in overridden:
            overridden.append(name)
        rules[name] = RetentionRule(channel_name=name, max_age=max_age)

    if not rules:
        raise InvalidChannelConfig("Channel retention is empty")

    return RetentionConfig(rules, overridden=tuple(overridden))


__all__ = ["parse_channel_retention"]
