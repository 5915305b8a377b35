"""
Retention Sweeper - Services Package
====================================

The remote Directory & History Service and its Discord implementation.
"""

from .directory import DirectoryService
from .discord_directory import DiscordDirectory


__all__ = [
    "DirectoryService",
    "DiscordDirectory",
]
