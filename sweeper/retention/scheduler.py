"""
Retention Sweeper - Sweep Scheduler
===================================

Drives the sweep coordinator on a fixed interval, forever.

DESIGN:
    Two states: IDLE (waiting for the next tick) and SWEEPING.

    - The first tick fires immediately.
    - Each following tick is due ``interval`` seconds after the previous
      tick started, not after it finished. A sweep that overruns the
      interval is followed straight away by the next one; sweeps never
      overlap and missed ticks are not replayed.
    - Every sweep returns the scheduler to IDLE, whether the cycle was
      aborted or raised something unexpected.
    - stop() only takes effect between ticks. A sweep in progress always
      runs to completion.
"""

import asyncio
import time
from enum import Enum
from typing import Callable, Optional

from sweeper.core.constants import DEFAULT_SWEEP_INTERVAL
from sweeper.core.logger import logger
from sweeper.retention.coordinator import SweepCoordinator, SweepReport
from sweeper.utils.error_handler import ErrorHandler


class SchedulerState(Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"


class SweepScheduler:
    """
    Fixed-rate sweep loop.

    Attributes:
        coordinator: Runs each sweep.
        interval: Seconds between the starts of two consecutive sweeps.
        state: Current SchedulerState.
        cycles: Number of sweeps started so far.
        last_report: Report of the most recent completed sweep.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(
        self,
        coordinator: SweepCoordinator,
        interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.coordinator = coordinator
        self.interval = interval
        self.state = SchedulerState.IDLE
        self.cycles = 0
        self.last_report: Optional[SweepReport] = None
        self._clock = clock
        self._stop_event = asyncio.Event()

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    def stop(self) -> None:
        """Ask the loop to exit before its next tick."""
        if not self._stop_event.is_set():
            logger.info("Sweep Scheduler stopping after current cycle")
        self._stop_event.set()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    async def run(self) -> None:
        """Run sweeps until stop() is called."""
        logger.tree("Sweep Scheduler Started", [
            ("Interval", f"{self.interval:g}s"),
            ("Channels", str(len(self.coordinator.retention))),
            ("Dry Run", "Yes" if self.coordinator.dry_run else "No"),
        ], emoji="⏰")

        while not self._stop_event.is_set():
            tick_started = self._clock()
            await self._tick()

            delay = tick_started + self.interval - self._clock()
            if delay <= 0:
                logger.warning("Sweep Overran Interval", [
                    ("Cycle", str(self.cycles)),
                    ("Overrun", f"{-delay:.1f}s"),
                ])
                continue

            logger.debug(f"Sleeping {delay:.1f}s until next sweep")
            await self._wait(delay)

        logger.info("Sweep Scheduler Stopped")

    # =========================================================================
    # Internals
    # =========================================================================

    async def _tick(self) -> None:
        self.state = SchedulerState.SWEEPING
        self.cycles += 1
        try:
            self.last_report = await self.coordinator.sweep()
        except Exception as e:
            ErrorHandler.handle(e, location="SweepScheduler.tick", cycle=self.cycles)
        finally:
            self.state = SchedulerState.IDLE

    async def _wait(self, delay: float) -> None:
        """Sleep up to ``delay`` seconds, waking early if stop() is called."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass


__all__ = ["SchedulerState", "SweepScheduler"]
