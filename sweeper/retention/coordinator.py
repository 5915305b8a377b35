"""
Retention Sweeper - Sweep Coordinator
=====================================

Runs one full retention pass over every guild and channel.

DESIGN:
    Per guild, per channel with a matching rule:
    paginate history -> filter stale -> delete.

    Failures are contained at the smallest unit that owns them:
    - channel history or deletion fails: log it, move to the next channel
    - listing a guild's channels fails: log it, skip that guild
    - listing guilds fails: log it, end this cycle early

    None of these ever escape sweep(); the scheduler only sees a report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sweeper.core.constants import GUILD_PAGE_SIZE, HISTORY_PAGE_SIZE
from sweeper.core.errors import ServiceError, log_service_error
from sweeper.core.logger import logger
from sweeper.core.models import Channel, Guild, RetentionConfig, RetentionRule
from sweeper.retention.executor import DeletionExecutor, DeletionResult
from sweeper.retention.filter import filter_stale
from sweeper.retention.paginator import HistoryPaginator
from sweeper.services.directory import DirectoryService
from sweeper.utils.duration import format_duration


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Sweep Report
# =============================================================================

@dataclass
class SweepReport:
    """Counters for one sweep cycle."""

    started_at: datetime = field(default_factory=utcnow)
    finished_at: Optional[datetime] = None
    guilds_seen: int = 0
    guilds_failed: int = 0
    channels_swept: int = 0
    channels_failed: int = 0
    messages_scanned: int = 0
    messages_deleted: int = 0
    messages_already_gone: int = 0
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.aborted and not self.guilds_failed and not self.channels_failed


# =============================================================================
# Sweep Coordinator
# =============================================================================

class SweepCoordinator:
    """
    Composes paginator, filter and executor across every guild.

    Attributes:
        service: Remote directory, injected at construction.
        retention: Immutable channel retention rules.
        delete_pinned: Whether pinned messages may be deleted.
        dry_run: Passed to the executor; nothing is deleted when set.
    """

    def __init__(
        self,
        service: DirectoryService,
        retention: RetentionConfig,
        *,
        delete_pinned: bool = False,
        dry_run: bool = False,
        clock: Callable[[], datetime] = utcnow,
        page_size: int = HISTORY_PAGE_SIZE,
        guild_page_size: int = GUILD_PAGE_SIZE,
    ) -> None:
        self.service = service
        self.retention = retention
        self.delete_pinned = delete_pinned
        self.dry_run = dry_run
        self._clock = clock
        self._guild_page_size = guild_page_size
        self.paginator = HistoryPaginator(service, page_size=page_size)
        self.executor = DeletionExecutor(service, dry_run=dry_run)

    # =========================================================================
    # Full Sweep
    # =========================================================================

    async def sweep(self) -> SweepReport:
        """
        Run one retention cycle.

        Returns:
            SweepReport; ``aborted`` is set when guilds could not be listed.
        """
        report = SweepReport(started_at=self._clock())

        try:
            guilds = await self._list_all_guilds()
        except ServiceError as e:
            log_service_error(e, [("Scope", "Cycle aborted")])
            report.aborted = True
            report.finished_at = self._clock()
            return report

        for guild in guilds:
            report.guilds_seen += 1
            await self._sweep_guild(guild, report)

        report.finished_at = self._clock()
        self._log_report(report)
        return report

    async def _list_all_guilds(self) -> List[Guild]:
        guilds: List[Guild] = []
        after_id: Optional[int] = None

        while True:
            page = await self.service.list_guilds(after_id, self._guild_page_size)
            guilds.extend(page)
            if len(page) < self._guild_page_size:
                return guilds
            after_id = max(guild.id for guild in page)

    async def _sweep_guild(self, guild: Guild, report: SweepReport) -> None:
        try:
            channels = await self.service.list_channels(guild.id)
        except ServiceError as e:
            log_service_error(e, [("Guild", f"{guild.name} ({guild.id})"), ("Scope", "Guild skipped")])
            report.guilds_failed += 1
            return

        for channel in channels:
            rule = self.retention.rule_for(channel.name)
            if rule is None:
                continue

            try:
                result = await self.sweep_channel(channel, rule, report)
            except ServiceError as e:
                log_service_error(e, [
                    ("Guild", guild.name),
                    ("Channel", f"#{channel.name} ({channel.id})"),
                    ("Scope", "Channel skipped"),
                ])
                report.channels_failed += 1
                continue

            if result.ok:
                report.channels_swept += 1
            else:
                log_service_error(result.error, [
                    ("Guild", guild.name),
                    ("Channel", f"#{channel.name} ({channel.id})"),
                    ("Deleted Before Failure", str(result.deleted)),
                    ("Remaining", str(result.skipped)),
                ])
                report.channels_failed += 1

    # =========================================================================
    # Single Channel
    # =========================================================================

    async def sweep_channel(
        self,
        channel: Channel,
        rule: RetentionRule,
        report: Optional[SweepReport] = None,
    ) -> DeletionResult:
        """
        Paginate, filter and delete for one channel.

        Raises:
            ServiceError: If history pagination fails. Deletion failures are
                returned inside the DeletionResult instead.
        """
        messages = [message async for message in self.paginator.paginate(channel.id)]
        stale = filter_stale(messages, rule.max_age, self._clock(), self.delete_pinned)
        result = await self.executor.delete_all(channel.id, stale)

        if report is not None:
            report.messages_scanned += len(messages)
            report.messages_deleted += result.deleted
            report.messages_already_gone += result.already_gone

        if result.deleted or result.already_gone:
            logger.tree("Channel Swept", [
                ("Channel", f"#{channel.name} ({channel.id})"),
                ("Retention", format_duration(rule.max_age)),
                ("Scanned", str(len(messages))),
                ("Deleted", str(result.deleted)),
                ("Already Gone", str(result.already_gone)),
            ], emoji="🧹")
        else:
            logger.debug(f"#{channel.name}: {len(messages)} scanned, nothing stale")

        return result

    # =========================================================================
    # Reporting
    # =========================================================================

    def _log_report(self, report: SweepReport) -> None:
        duration = (report.finished_at - report.started_at).total_seconds()
        items = [
            ("Guilds", f"{report.guilds_seen} ({report.guilds_failed} failed)"),
            ("Channels", f"{report.channels_swept} swept, {report.channels_failed} failed"),
            ("Scanned", str(report.messages_scanned)),
            ("Deleted", str(report.messages_deleted)),
            ("Already Gone", str(report.messages_already_gone)),
            ("Duration", f"{duration:.1f}s"),
        ]
        if self.dry_run:
            items.append(("Mode", "Dry run"))

        if report.ok:
            logger.tree("Sweep Complete", items, emoji="✅")
        else:
            logger.tree("Sweep Completed With Errors", items, emoji="⚠️")


__all__ = ["SweepCoordinator", "SweepReport", "utcnow"]
