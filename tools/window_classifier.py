"""
Time-Window Classifier
Sorts a patient's dose records into time-relative buckets
"""

from typing import Any, Dict, List, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from config import schedule_config
from tools.clock import ensure_time


@dataclass
class AdherenceStats:
    """Aggregate counts over the whole record set"""
    total: int = 0
    taken: int = 0
    skipped: int = 0
    pending: int = 0
    overdue: int = 0
    adherence_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "taken": self.taken,
            "skipped": self.skipped,
            "pending": self.pending,
            "overdue": self.overdue,
            "adherence_rate": self.adherence_rate,
        }


@dataclass
class AdherenceSnapshot:
    """
    Buckets for one patient at one instant.

    Buckets may overlap: every due_now record is also pending, and a taken
    or skipped record dated in the future is also upcoming.
    """
    today: date
    current_time: time
    horizon_time: time
    all: List[Any] = field(default_factory=list)
    pending: List[Any] = field(default_factory=list)
    due_now: List[Any] = field(default_factory=list)
    overdue: List[Any] = field(default_factory=list)
    taken: List[Any] = field(default_factory=list)
    skipped: List[Any] = field(default_factory=list)
    upcoming: List[Any] = field(default_factory=list)
    stats: AdherenceStats = field(default_factory=AdherenceStats)

    @property
    def current_time_str(self) -> str:
        return self.current_time.strftime("%H:%M:%S")


def _minute_floor(moment: datetime) -> time:
    return moment.replace(second=0, microsecond=0).time()


def adherence_rate(taken: int, total: int) -> float:
    """Percentage of taken records, one decimal place; 0 for an empty set"""
    if total == 0:
        return 0.0
    return round(taken / total * 100, 1)


def classify_records(records: Sequence[Any], now: datetime) -> AdherenceSnapshot:
    """
    Classify dose records against ``now``.

    ``current_time`` and ``horizon_time`` are clock times truncated to the
    minute; the horizon is DUE_WINDOW_MINUTES after now and is a plain
    clock time, so near midnight it wraps to the early morning.

    Bucket rules (unresolved = not taken and not skipped):
        pending:  today, unresolved, time <= horizon
        due_now:  today, unresolved, current <= time <= horizon
        overdue:  unresolved, earlier day or today before current
        taken:    is_taken
        skipped:  is_skipped
        upcoming: later day, or today after horizon

    Stats always describe the full record set passed in.
    """
    today = now.date()
    current_time = _minute_floor(now)
    horizon_time = _minute_floor(now + timedelta(minutes=schedule_config.DUE_WINDOW_MINUTES))

    snapshot = AdherenceSnapshot(
        today=today,
        current_time=current_time,
        horizon_time=horizon_time,
        all=list(records),
    )

    for record in snapshot.all:
        day = record.scheduled_date
        at = ensure_time(record.scheduled_time)
        unresolved = not record.is_taken and not record.is_skipped

        if unresolved and day == today and at <= horizon_time:
            snapshot.pending.append(record)
            if at >= current_time:
                snapshot.due_now.append(record)

        if unresolved and (day < today or (day == today and at < current_time)):
            snapshot.overdue.append(record)

        if record.is_taken:
            snapshot.taken.append(record)

        if record.is_skipped:
            snapshot.skipped.append(record)

        if day > today or (day == today and at > horizon_time):
            snapshot.upcoming.append(record)

    total = len(snapshot.all)
    snapshot.stats = AdherenceStats(
        total=total,
        taken=len(snapshot.taken),
        skipped=len(snapshot.skipped),
        pending=len(snapshot.pending),
        overdue=len(snapshot.overdue),
        adherence_rate=adherence_rate(len(snapshot.taken), total),
    )
    return snapshot
