"""
Retention Sweeper - Configuration Module
========================================

Centralized configuration loaded from environment variables.

DESIGN:
    A single source of truth built once at startup. Validation happens at
    load time, so a bad CHANNEL_RETENTION or a missing token stops the
    process before the first sweep.

    Key patterns:
    - get_config() caches one Config instance
    - Required variables are collected first and reported together
    - Optional values fall back to defaults with a warning
"""

import os
from dataclasses import dataclass
from typing import Optional

from sweeper.core.constants import (
    DEFAULT_SWEEP_INTERVAL,
    MAX_SWEEP_INTERVAL,
    MIN_SWEEP_INTERVAL,
)
from sweeper.core.errors import ConfigValidationError
from sweeper.core.logger import logger
from sweeper.core.models import RetentionConfig
from sweeper.retention.rules import parse_channel_retention
from sweeper.utils.duration import format_duration


TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Sweeper configuration loaded from environment variables.

    Attributes:
        discord_token: Bot token, passed through to discord.py.
        retention: Parsed CHANNEL_RETENTION rules.
        delete_pinned: Whether pinned messages may be deleted.
        dry_run: Log deletion candidates without deleting them.
        sweep_interval: Seconds between the starts of two sweeps.
        error_webhook_url: Discord webhook receiving error alerts.
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str
    retention: RetentionConfig

    # -------------------------------------------------------------------------
    # Optional: Behaviour
    # -------------------------------------------------------------------------

    delete_pinned: bool = False
    dry_run: bool = False
    sweep_interval: int = DEFAULT_SWEEP_INTERVAL

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None


# =============================================================================
# Validation Helpers
# =============================================================================

def _parse_bool(value: Optional[str]) -> bool:
    """Parse an env flag. Only true/1/yes/on (any case) count as true."""
    if not value:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer clamped into range, or default.
    """
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), otherwise warn and drop it."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object.

    Raises:
        ConfigValidationError: If a required variable is missing.
        InvalidChannelConfig: If CHANNEL_RETENTION has a malformed entry.
        InvalidDuration: If a CHANNEL_RETENTION duration is malformed.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN", "").strip()
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    retention_str = os.getenv("CHANNEL_RETENTION", "").strip()
    if not retention_str:
        missing.append("CHANNEL_RETENTION")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return Config(
        discord_token=discord_token,
        retention=parse_channel_retention(retention_str),
        delete_pinned=_parse_bool(os.getenv("DELETE_PINNED")),
        dry_run=_parse_bool(os.getenv("DRY_RUN")),
        sweep_interval=_parse_int_with_default(
            os.getenv("SWEEP_INTERVAL"),
            DEFAULT_SWEEP_INTERVAL,
            "SWEEP_INTERVAL",
            min_val=MIN_SWEEP_INTERVAL,
            max_val=MAX_SWEEP_INTERVAL,
        ),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading it on first call.

    Raises:
        ConfigError: On first call if the environment is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def log_config(config: Config) -> None:
    """Log the loaded configuration, warning about overridden retention entries."""
    for name in config.retention.overridden:
        logger.warning(f"CHANNEL_RETENTION lists #{name} more than once, last entry wins")

    logger.tree("Configuration Loaded", [
        ("Channels", ", ".join(
            f"#{name} ({format_duration(rule.max_age)})"
            for name, rule in config.retention.items()
        )),
        ("Delete Pinned", "Yes" if config.delete_pinned else "No"),
        ("Dry Run", "Yes" if config.dry_run else "No"),
        ("Interval", f"{config.sweep_interval}s"),
        ("Error Webhook", "Set" if config.error_webhook_url else "Not set"),
    ], emoji="⚙️")


__all__ = [
    "Config",
    "load_config",
    "get_config",
    "log_config",
]
