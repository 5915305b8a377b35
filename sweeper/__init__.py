"""
Retention Sweeper - Source Package
==================================

Scheduled retention sweeper for Discord: deletes messages older than a
per-channel age threshold, once a minute, forever.

Package Structure:
- core/: configuration, logging, error taxonomy, data models
- retention/: rules parser, paginator, filter, executor, coordinator, scheduler
- services/: directory service protocol and its discord.py implementation
- utils/: duration parsing and error reporting
"""

__version__ = "1.0.0"
