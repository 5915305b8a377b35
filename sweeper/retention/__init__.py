"""
Retention Sweeper - Retention Engine
====================================

Data flow:
    SweepScheduler -> SweepCoordinator -> (per guild -> per channel)
    -> HistoryPaginator -> filter_stale -> DeletionExecutor
"""

from .coordinator import SweepCoordinator, SweepReport
from .executor import DeletionExecutor, DeletionResult
from .filter import filter_stale, is_stale
from .paginator import HistoryPaginator
from .rules import parse_channel_retention
from .scheduler import SchedulerState, SweepScheduler


__all__ = [
    "parse_channel_retention",
    "filter_stale",
    "is_stale",
    "HistoryPaginator",
    "DeletionExecutor",
    "DeletionResult",
    "SweepCoordinator",
    "SweepReport",
    "SchedulerState",
    "SweepScheduler",
]
