"""Todo activity domain entity"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from worktrack.domain.entities.todo import WorkState


class ActivityType(str, Enum):
    """Time-tracking event types"""
    STARTED = "started"
    PAUSED = "paused"
    COMPLETED = "completed"
    DISCARDED = "discarded"


# Activity types that move the work state forward
STATE_CHANGING_TYPES = (ActivityType.STARTED, ActivityType.PAUSED, ActivityType.COMPLETED)


@dataclass(frozen=True)
class TodoActivity:
    """Append-only record of a work-state event

    Only ``work_period_id`` changes after creation, and only through
    ``dataclasses.replace``.
    """
    id: str
    todo_id: str
    type: ActivityType
    previous_state: WorkState
    work_time: Optional[int] = None  # seconds contributed by this event
    note: Optional[str] = None
    work_period_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            object.__setattr__(self, "created_at", datetime.utcnow())
