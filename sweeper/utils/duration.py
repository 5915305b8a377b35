"""
Duration Utilities
==================

Parsing and formatting of retention durations.

Retention durations use a deliberately small grammar: a positive integer
followed by exactly one unit suffix, ``d`` for days or ``w`` for weeks.
Anything else is rejected so a typo in the operator's configuration stops
the process at startup instead of deleting the wrong messages.

Usage:
    from sweeper.utils.duration import parse_retention_duration, format_duration

    td = parse_retention_duration("2w")   # timedelta(days=14)
    format_duration(td)                   # "2w"
"""

from datetime import timedelta

from sweeper.core.constants import (
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_WEEK,
)
from sweeper.core.errors import InvalidDuration


# =============================================================================
# Units
# =============================================================================

RETENTION_UNITS = {
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


# =============================================================================
# Parsing
# =============================================================================

def parse_retention_duration(duration_str: str) -> timedelta:
    """
    Parse a retention duration such as ``7d`` or ``2w``.

    Args:
        duration_str: Magnitude followed by a unit suffix.

    Returns:
        The duration as a timedelta, always strictly positive.

    Raises:
        InvalidDuration: If the suffix is missing or unknown, the magnitude
            is not an integer, or the result is not positive.

    Examples:
        >>> parse_retention_duration("7d")
        datetime.timedelta(days=7)
        >>> parse_retention_duration("2w")
        datetime.timedelta(days=14)
    """
    value = duration_str.strip()
    if not value:
        raise InvalidDuration("Empty duration")

    magnitude, unit = value[:-1], value[-1]
    if unit not in RETENTION_UNITS:
        raise InvalidDuration(f"Unknown unit in duration {value!r}, expected 'd' or 'w'")

    # int() would also accept "+7", "٧" or "1_0", none of which we want.
    if not magnitude.isascii() or not magnitude.isdigit():
        raise InvalidDuration(f"Invalid magnitude in duration {value!r}")

    count = int(magnitude)
    if count <= 0:
        raise InvalidDuration(f"Duration must be positive, got {value!r}")

    try:
        return count * RETENTION_UNITS[unit]
    except OverflowError as e:
        raise InvalidDuration(f"Duration {value!r} is too large") from e


# =============================================================================
# Formatting
# =============================================================================

def format_duration(td: timedelta, max_units: int = 3) -> str:
    """
    Format a timedelta into a compact human-readable string.

    Args:
        td: Duration to format.
        max_units: Maximum number of units to show.

    Returns:
        Formatted string like "2w", "1w 3d" or "1d 12h".

    Examples:
        >>> format_duration(timedelta(days=10))
        '1w 3d'
        >>> format_duration(timedelta(seconds=30))
        '< 1m'
    """
    seconds = int(td.total_seconds())
    if seconds <= 0:
        return "0m"
    if seconds < SECONDS_PER_MINUTE:
        return "< 1m"

    parts = []
    for size, suffix in (
        (SECONDS_PER_WEEK, "w"),
        (SECONDS_PER_DAY, "d"),
        (SECONDS_PER_HOUR, "h"),
        (SECONDS_PER_MINUTE, "m"),
    ):
        if seconds >= size and len(parts) < max_units:
            count, seconds = divmod(seconds, size)
            parts.append(f"{count}{suffix}")

    return " ".join(parts)


__all__ = [
    "RETENTION_UNITS",
    "parse_retention_duration",
    "format_duration",
]
