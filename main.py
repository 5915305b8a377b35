#!/usr/bin/env python3
"""
Retention Sweeper - Entry Point
===============================

Deletes Discord messages older than each monitored channel's retention,
sweeping every SWEEP_INTERVAL seconds until the process is stopped.

Environment (.env is loaded automatically):
- DISCORD_TOKEN       Bot token (required)
- CHANNEL_RETENTION   e.g. "general:7d,logs:2w" (required)
- DELETE_PINNED       "true" to let pinned messages be deleted
- DRY_RUN             "true" to log candidates without deleting
- SWEEP_INTERVAL      Seconds between sweeps (default 60)
- ERROR_WEBHOOK_URL   Discord webhook for error alerts
"""

import asyncio
import signal
import sys

import discord
from dotenv import load_dotenv

from sweeper.core.config import get_config, log_config
from sweeper.core.errors import ConfigError
from sweeper.core.logger import logger
from sweeper.retention.coordinator import SweepCoordinator
from sweeper.retention.scheduler import SweepScheduler
from sweeper.services.discord_directory import DiscordDirectory
from sweeper.utils.error_handler import ErrorHandler


def _install_signal_handlers(scheduler: SweepScheduler) -> None:
    """Stop the scheduler between ticks on SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except NotImplementedError:
            # Windows event loops do not support signal handlers.
            pass


async def main() -> int:
    """
    Load configuration, log in, and run the sweep scheduler.

    Returns:
        Process exit status. Only startup failures return non-zero.
    """
    load_dotenv()

    try:
        config = get_config()
    except ConfigError as e:
        logger.error("Invalid Configuration", [
            ("Error", str(e)),
            ("Type", type(e).__name__),
        ])
        return 1

    logger.set_webhook(config.error_webhook_url)
    log_config(config)

    try:
        directory = await DiscordDirectory.login(config.discord_token)
    except discord.LoginFailure as e:
        logger.error("Token Rejected", [("Error", str(e))])
        return 1

    coordinator = SweepCoordinator(
        directory,
        config.retention,
        delete_pinned=config.delete_pinned,
        dry_run=config.dry_run,
    )
    scheduler = SweepScheduler(coordinator, interval=config.sweep_interval)
    _install_signal_handlers(scheduler)

    try:
        await scheduler.run()
    finally:
        await directory.close()

    return 0


def run() -> None:
    """Console entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("🛑 Sweeper stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(e, location="main.run", critical=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
