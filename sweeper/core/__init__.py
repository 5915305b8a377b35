"""
Retention Sweeper - Core Package
================================

Configuration, logging, error taxonomy and data models.

DESIGN:
    config is not re-exported here: it imports the
    retention rules parser, which itself imports from core.
"""

from .errors import (
    ConfigError,
    ConfigValidationError,
    Forbidden,
    InvalidChannelConfig,
    InvalidDuration,
    NotFound,
    RateLimited,
    ServiceError,
    SweeperError,
    TransportError,
)
from .logger import logger, TreeLogger
from .models import Channel, Guild, Message, RetentionConfig, RetentionRule


__all__ = [
    # Errors
    "SweeperError",
    "ConfigError",
    "ConfigValidationError",
    "InvalidChannelConfig",
    "InvalidDuration",
    "ServiceError",
    "TransportError",
    "NotFound",
    "Forbidden",
    "RateLimited",
    # Logger
    "logger",
    "TreeLogger",
    # Models
    "Guild",
    "Channel",
    "Message",
    "RetentionRule",
    "RetentionConfig",
]
