"""Todo domain entity"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List

from worktrack.domain.errors import SelfDependencyError, SelfReferenceError


class TodoStatus(str, Enum):
    """Todo status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WorkState(str, Enum):
    """Live time-tracking state, distinct from the todo status"""
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class PriorityLevel(str, Enum):
    """Todo priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Todo:
    """Todo domain entity

    ``dependency_ids`` and ``dependent_ids`` are read views over the
    dependency edge table; ``parent_id`` is the only stored direction of the
    hierarchy.
    """
    id: str
    title: str
    description: Optional[str] = None
    status: TodoStatus = TodoStatus.PENDING
    work_state: WorkState = WorkState.IDLE
    total_work_time: int = 0  # seconds
    last_state_change_at: Optional[datetime] = None
    priority: PriorityLevel = PriorityLevel.MEDIUM
    due_date: Optional[datetime] = None
    parent_id: Optional[str] = None
    project_id: Optional[str] = None
    dependency_ids: List[str] = field(default_factory=list)
    dependent_ids: List[str] = field(default_factory=list)
    tag_ids: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        if self.updated_at is None:
            self.updated_at = datetime.utcnow()
        if self.last_state_change_at is None:
            self.last_state_change_at = self.created_at
        if self.parent_id is not None and self.parent_id == self.id:
            raise SelfReferenceError(self.id)
        if self.id in self.dependency_ids:
            raise SelfDependencyError(self.id)

    def has_dependency_on(self, dependency_id: str) -> bool:
        return dependency_id in self.dependency_ids

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True when the due date has passed and the todo is not completed"""
        if self.due_date is None or self.status == TodoStatus.COMPLETED:
            return False
        now = now or datetime.utcnow()
        return self.due_date < now

    def is_due_soon(self, days: int = 2, now: Optional[datetime] = None) -> bool:
        """True when the due date falls within the next ``days`` days"""
        if self.due_date is None or self.status == TodoStatus.COMPLETED:
            return False
        now = now or datetime.utcnow()
        return now <= self.due_date <= now + timedelta(days=days)
