"""Work period ledger

Interval math, overlap rejection and utilization statistics. Intervals are
half-open, ``[start, end)``, so two periods that only touch at a boundary do
not overlap.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from worktrack.domain.entities.todo_activity import TodoActivity
from worktrack.domain.entities.work_period import WorkPeriod
from worktrack.domain.errors import InvalidIntervalError, OverlappingPeriodError

Interval = Tuple[datetime, datetime]


def intervals_overlap(first: Interval, second: Interval) -> bool:
    """``[s1, e1)`` and ``[s2, e2)`` overlap iff ``s1 < e2`` and ``s2 < e1``"""
    return first[0] < second[1] and second[0] < first[1]


def interval_contains(outer: Interval, inner: Interval) -> bool:
    return outer[0] <= inner[0] and inner[1] <= outer[1]


def contains_instant(interval: Interval, instant: datetime) -> bool:
    return interval[0] <= instant < interval[1]


def is_same_day(first: datetime, second: datetime) -> bool:
    return first.date() == second.date()


def validate_interval(start_time: datetime, end_time: datetime) -> None:
    if start_time >= end_time:
        raise InvalidIntervalError(start_time, end_time)


def find_overlaps(
    candidate: WorkPeriod,
    existing: Iterable[WorkPeriod],
) -> List[WorkPeriod]:
    """Periods on the candidate's date whose interval intersects it, itself excluded"""
    interval = (candidate.start_time, candidate.end_time)
    return [
        period
        for period in existing
        if period.id != candidate.id
        and period.date == candidate.date
        and intervals_overlap(interval, (period.start_time, period.end_time))
    ]


def ensure_no_overlap(candidate: WorkPeriod, existing: Iterable[WorkPeriod]) -> None:
    """Raise :class:`OverlappingPeriodError` if ``candidate`` collides with ``existing``"""
    conflicts = find_overlaps(candidate, existing)
    if conflicts:
        raise OverlappingPeriodError(period.id for period in conflicts)


@dataclass(frozen=True)
class StatisticsFilter:
    """Optional restrictions for :func:`compute_statistics`

    A field left at ``None`` does not restrict. An ID list restricts to its
    members, so an empty list selects nothing.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    work_period_ids: Optional[Sequence[str]] = None
    todo_ids: Optional[Sequence[str]] = None
    tag_ids: Optional[Sequence[str]] = None

    def matches_period(self, period: WorkPeriod) -> bool:
        if self.start_date is not None and period.date < self.start_date:
            return False
        if self.end_date is not None and period.date > self.end_date:
            return False
        if self.work_period_ids is not None and period.id not in self.work_period_ids:
            return False
        return True


@dataclass
class WorkPeriodStatistics:
    """All times in seconds"""
    total_work_period_time: int = 0
    total_activity_time: int = 0
    utilization_rate: float = 0.0
    activities_by_todo: Dict[str, int] = field(default_factory=dict)
    activities_by_tag: Dict[str, int] = field(default_factory=dict)


def compute_statistics(
    periods: Iterable[WorkPeriod],
    activities: Iterable[TodoActivity],
    tags_by_todo: Mapping[str, Sequence[str]],
    criteria: Optional[StatisticsFilter] = None,
) -> WorkPeriodStatistics:
    """Aggregate tracked activity time against scheduled period time

    ``activities`` may hold more than needed; only those linked to a selected
    period and carrying a ``work_time`` count. An activity contributes to every
    tag its todo carries, so the per-tag totals can sum to more than
    ``total_activity_time``.
    """
    criteria = criteria or StatisticsFilter()
    selected = [period for period in periods if criteria.matches_period(period)]
    selected_ids = {period.id for period in selected}
    total_period_time = sum(period.duration_seconds for period in selected)

    todo_filter = set(criteria.todo_ids) if criteria.todo_ids is not None else None
    tag_filter = set(criteria.tag_ids) if criteria.tag_ids is not None else None

    by_todo: Dict[str, int] = defaultdict(int)
    by_tag: Dict[str, int] = defaultdict(int)
    total_activity_time = 0

    for activity in activities:
        if activity.work_period_id not in selected_ids or activity.work_time is None:
            continue
        if todo_filter is not None and activity.todo_id not in todo_filter:
            continue
        todo_tags = tags_by_todo.get(activity.todo_id, ())
        if tag_filter is not None and tag_filter.isdisjoint(todo_tags):
            continue

        total_activity_time += activity.work_time
        by_todo[activity.todo_id] += activity.work_time
        for tag_id in todo_tags:
            by_tag[tag_id] += activity.work_time

    utilization_rate = total_activity_time / total_period_time if total_period_time > 0 else 0.0

    return WorkPeriodStatistics(
        total_work_period_time=total_period_time,
        total_activity_time=total_activity_time,
        utilization_rate=utilization_rate,
        activities_by_todo=dict(by_todo),
        activities_by_tag=dict(by_tag),
    )
