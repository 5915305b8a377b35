"""
Retention Sweeper - Error Handler
=================================

Reporting for exceptions nobody planned for.

Expected failures (ServiceError, ConfigError) are matched where they
happen. Anything that still reaches the scheduler loop or the entry point
ends up here, gets a category and a recovery hint, and, when critical,
a JSON dump under logs/errors/ for later analysis.
"""

import json
import sys
import traceback
from datetime import datetime
from typing import Any, Dict

import aiohttp
import discord

from sweeper.core.constants import LOG_TRUNCATE_SHORT
from sweeper.core.errors import ConfigError, ServiceError
from sweeper.core.logger import LOGS_DIR, logger


class ErrorContext:
    """Captures and formats error context."""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception.
            location: Where the error occurred.
            **kwargs: Additional context (guild, channel, etc.).

        Returns:
            Dictionary with full error context.
        """
        return {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": kwargs,
        }


class ErrorHandler:
    """Categorised error reporting with recovery suggestions."""

    ERROR_CATEGORIES = (
        ("config", (ConfigError, discord.LoginFailure)),
        ("service", (ServiceError,)),
        ("discord", (discord.DiscordException,)),
        ("network", (aiohttp.ClientError, ConnectionError, TimeoutError, OSError)),
    )

    RECOVERY_SUGGESTIONS = {
        "config": "Fix the environment (.env) and restart",
        "service": "Unit of work skipped - will retry next cycle",
        "discord": "Discord API issue - will retry next cycle",
        "network": "Network issue - will retry next cycle",
        "general": "Unexpected error - check logs for details",
    }

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        for category, error_types in cls.ERROR_CATEGORIES:
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, category: str) -> str:
        return cls.RECOVERY_SUGGESTIONS.get(category, cls.RECOVERY_SUGGESTIONS["general"])

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context: Any) -> str:
        """
        Log an error with its category and recovery hint.

        Args:
            e: The exception.
            location: Where the error occurred.
            critical: Whether this error stops the process.
            **context: Additional context stored with critical errors.

        Returns:
            The error category.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(category)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category.upper()),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:LOG_TRUNCATE_SHORT]),
            ("Recovery", suggestion),
        ]

        if critical:
            logger.error("💥 Critical Error", details)
            logger.info(f"Traceback:\n{full_context['traceback']}")
            cls._store_critical_error(full_context)
        else:
            logger.error("Unexpected Error", details)

        return category

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        error_dir = LOGS_DIR / "errors"
        try:
            error_dir.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            error_file = error_dir / f"error_{timestamp}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(context, f, indent=2, default=str)
        except OSError as save_error:
            logger.warning(f"Failed to save error details: {save_error}")
            return
        logger.info(f"Critical error saved to {error_file}")


__all__ = ["ErrorContext", "ErrorHandler"]
