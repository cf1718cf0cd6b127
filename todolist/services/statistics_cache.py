"""
Statistics cache service for aggregate task counts
"""

from datetime import datetime
from typing import Iterable, Optional
from todolist.models.response import TaskStats
from todolist.models.task import Task, TaskStatus, TaskPriority
from todolist.utils.date_utils import get_current_datetime
from todolist.utils.logger import logger


def compute_statistics(tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
    """
    Count tasks per status, per priority and overdue in a single pass

    Args:
        tasks: Tasks to count
        now: Reference time for the overdue check (defaults to current time)

    Returns:
        Statistics snapshot
    """
    now = now or get_current_datetime()
    counts = {
        "total": 0,
        "todo": 0,
        "in_progress": 0,
        "completed": 0,
        "low_priority": 0,
        "medium_priority": 0,
        "high_priority": 0,
        "overdue": 0,
    }
    status_buckets = {
        TaskStatus.TODO: "todo",
        TaskStatus.IN_PROGRESS: "in_progress",
        TaskStatus.COMPLETED: "completed",
    }
    priority_buckets = {
        TaskPriority.LOW: "low_priority",
        TaskPriority.MEDIUM: "medium_priority",
        TaskPriority.HIGH: "high_priority",
    }

    for task in tasks:
        counts["total"] += 1
        counts[status_buckets[task.status]] += 1
        counts[priority_buckets[task.priority]] += 1
        if task.is_overdue(now):
            counts["overdue"] += 1

    return TaskStats(**counts)


class StatisticsCache:
    """Service for caching task statistics until the next mutation"""

    def __init__(self):
        """Initialize an empty (dirty) cache"""
        self.logger = logger
        self._stats: Optional[TaskStats] = None
        self._reference_time: Optional[datetime] = None
        self._dirty: bool = True

    @property
    def is_dirty(self) -> bool:
        return self._dirty or self._stats is None

    def get(self, tasks: Iterable[Task], now: Optional[datetime] = None) -> TaskStats:
        """
        Get statistics, recomputing only if the cache is stale or an explicit
        reference time differs from the one the cached counts were taken at

        Args:
            tasks: Current tasks of the collection
            now: Reference time for the overdue check

        Returns:
            Statistics snapshot
        """
        if not self.is_dirty and (now is None or now == self._reference_time):
            self.logger.debug("[StatsCache] Using cached statistics")
            return self._stats

        self._reference_time = now or get_current_datetime()
        self._stats = compute_statistics(tasks, self._reference_time)
        self._dirty = False
        self.logger.debug(f"[StatsCache] Statistics recomputed: total={self._stats.total}")
        return self._stats

    def invalidate(self) -> None:
        """Mark cached statistics as stale"""
        self._dirty = True
