"""
Retention Sweeper - Error Taxonomy
==================================

Every failure the sweeper knows how to react to has its own type here.

DESIGN:
    Two branches hang off SweeperError:

    - ConfigError: bad startup configuration. Fatal, the process exits
      before the first sweep.
    - ServiceError: a call to the remote directory failed. Raised by the
      service adapter, matched explicitly by the executor and coordinator
      to decide whether the channel, the guild, or the whole cycle is lost.

    NotFound is a ServiceError like the others, but the executor treats it
    as a successful no-op so overlapping sweeps stay idempotent.
"""

from typing import List, Optional, Tuple

from sweeper.core.constants import LOG_TRUNCATE_SHORT
from sweeper.core.logger import logger


# =============================================================================
# Base
# =============================================================================

class SweeperError(Exception):
    """Root of every error raised by the sweeper itself."""


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigError(SweeperError):
    """Startup configuration is missing or invalid."""


class ConfigValidationError(ConfigError):
    """A required environment variable is missing or malformed."""


class InvalidChannelConfig(ConfigError):
    """A retention entry is not of the form ``name:duration``."""


class InvalidDuration(ConfigError):
    """A retention duration has a bad magnitude or unit suffix."""


# =============================================================================
# Service Errors
# =============================================================================

class ServiceError(SweeperError):
    """
    A remote directory call failed.

    Attributes:
        operation: Short description of the call, e.g. "Delete message".
        detail: Text returned by the remote side, if any.
    """

    kind: str = "Service Error"

    def __init__(self, operation: str, detail: Optional[str] = None) -> None:
        self.operation = operation
        self.detail = detail
        message = f"{operation}: {self.kind}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class TransportError(ServiceError):
    """The remote service could not be reached or answered with a server error."""

    kind = "Transport Error"


class NotFound(ServiceError):
    """The target resource no longer exists."""

    kind = "Not Found"


class Forbidden(ServiceError):
    """The credential lacks permission for the operation."""

    kind = "Forbidden"


class RateLimited(ServiceError):
    """The remote rate limit was hit and not absorbed by the client."""

    kind = "Rate Limited"

    def __init__(
        self,
        operation: str,
        detail: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(operation, detail)


# =============================================================================
# Logging Helper
# =============================================================================

def log_service_error(
    error: ServiceError,
    context: Optional[List[Tuple[str, str]]] = None,
) -> None:
    """
    Log a ServiceError with severity chosen by its kind.

    Rate limits, permission problems and missing resources are expected
    in a long-running sweeper and go out as warnings. Transport errors
    are logged as errors.

    Args:
        error: The failure to log.
        context: Extra (key, value) rows for the log tree.
    """
    items = [("Operation", error.operation)]
    if error.detail:
        items.append(("Detail", error.detail[:LOG_TRUNCATE_SHORT]))
    if isinstance(error, RateLimited) and error.retry_after:
        items.append(("Retry After", f"{error.retry_after:.1f}s"))
    if context:
        items.extend(context)

    if isinstance(error, RateLimited):
        logger.warning("🚦 Rate Limited", items)
    elif isinstance(error, Forbidden):
        logger.warning("🚫 Forbidden", items)
    elif isinstance(error, NotFound):
        logger.warning("❓ Not Found", items)
    else:
        logger.error(f"❌ {error.kind}", items)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
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
    "log_service_error",
]
