"""
Retention Sweeper - Centralized Constants
=========================================

Magic numbers used across the sweeper. Import from here instead of
hardcoding values.
"""

# =============================================================================
# Time Constants (in seconds)
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_WEEK = 604800

# =============================================================================
# Scheduler
# =============================================================================

DEFAULT_SWEEP_INTERVAL = 60           # Seconds between sweep starts
MIN_SWEEP_INTERVAL = 5
MAX_SWEEP_INTERVAL = SECONDS_PER_DAY

# =============================================================================
# Pagination (Discord API maximums)
# =============================================================================

HISTORY_PAGE_SIZE = 100               # GET /channels/{id}/messages max limit
GUILD_PAGE_SIZE = 100                 # GET /users/@me/guilds (max 200)

# =============================================================================
# Discord Channel Types
# =============================================================================

# Channel types that carry a message history of their own.
MESSAGE_CHANNEL_TYPES = frozenset({
    0,   # GUILD_TEXT
    2,   # GUILD_VOICE (text-in-voice)
    5,   # GUILD_ANNOUNCEMENT
    13,  # GUILD_STAGE_VOICE
})

# =============================================================================
# Logging
# =============================================================================

LOG_TRUNCATE_SHORT = 100              # Error strings in log trees
LOG_ID_PREVIEW = 10                   # Ids listed in dry-run output
LOG_RETENTION_DAYS = 7                # Dated log folders kept on disk
WEBHOOK_TIMEOUT = 10                  # Seconds for error webhook POSTs


__all__ = [
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "SECONDS_PER_WEEK",
    "DEFAULT_SWEEP_INTERVAL",
    "MIN_SWEEP_INTERVAL",
    "MAX_SWEEP_INTERVAL",
    "HISTORY_PAGE_SIZE",
    "GUILD_PAGE_SIZE",
    "MESSAGE_CHANNEL_TYPES",
    "LOG_TRUNCATE_SHORT",
    "LOG_ID_PREVIEW",
    "LOG_RETENTION_DAYS",
    "WEBHOOK_TIMEOUT",
]
