"""Work period domain entity"""
import uuid
from dataclasses import dataclass, replace
from datetime import date as date_type, datetime, timedelta
from typing import Optional

from worktrack.domain.errors import InvalidIntervalError
from worktrack.domain.timestamps import to_naive_utc


@dataclass(frozen=True)
class WorkPeriod:
    """A named, scheduled ``[start_time, end_time)`` interval on a date

    Build new periods with :meth:`create`; change them only through the
    ``with_*`` methods so the interval is re-validated every time. Offset-aware
    times are converted to naive UTC on construction.
    """
    id: str
    name: str
    date: date_type
    start_time: datetime
    end_time: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "start_time", to_naive_utc(self.start_time))
        object.__setattr__(self, "end_time", to_naive_utc(self.end_time))
        if self.start_time >= self.end_time:
            raise InvalidIntervalError(self.start_time, self.end_time)
        if self.created_at is None:
            object.__setattr__(self, "created_at", datetime.utcnow())
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)

    @classmethod
    def create(
        cls,
        name: str,
        start_time: datetime,
        end_time: datetime,
        date: Optional[date_type] = None,
        id: Optional[str] = None,
    ) -> "WorkPeriod":
        start_time = to_naive_utc(start_time)
        return cls(
            id=id or str(uuid.uuid4()),
            name=name,
            date=date or start_time.date(),
            start_time=start_time,
            end_time=end_time,
        )

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def duration_seconds(self) -> int:
        return self.duration // timedelta(seconds=1)

    def with_name(self, name: str) -> "WorkPeriod":
        if name == self.name:
            return self
        return replace(self, name=name, updated_at=datetime.utcnow())

    def with_interval(self, start_time: datetime, end_time: datetime) -> "WorkPeriod":
        start_time, end_time = to_naive_utc(start_time), to_naive_utc(end_time)
        if start_time == self.start_time and end_time == self.end_time:
            return self
        return replace(self, start_time=start_time, end_time=end_time, updated_at=datetime.utcnow())

    def with_date(self, date: date_type) -> "WorkPeriod":
        if date == self.date:
            return self
        return replace(self, date=date, updated_at=datetime.utcnow())
