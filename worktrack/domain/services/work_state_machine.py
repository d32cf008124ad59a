"""Work-state machine

Pure transition functions over a todo's work state and elapsed-time
accumulator. Nothing here performs I/O or mutates its arguments; callers
persist the returned todo and activity.

    idle   -> active
    active -> paused | completed
    paused -> active | completed

``completed`` is left only through :func:`reopen`. A ``discarded`` event is
an annotation: it never changes the work state, but it still books elapsed
time when the todo was active.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from worktrack.domain.entities.todo import Todo, TodoStatus, WorkState
from worktrack.domain.entities.todo_activity import ActivityType, TodoActivity
from worktrack.domain.errors import InvalidStateTransitionError

ONE_SECOND = timedelta(seconds=1)


@dataclass(frozen=True)
class ActivityResult:
    """Outcome of a recorded activity"""
    todo: Todo
    activity: TodoActivity


def elapsed_seconds(since: datetime, now: datetime) -> int:
    """Whole seconds between two instants, floored and never negative"""
    return max(0, (now - since) // ONE_SECOND)


def record_activity(
    todo: Todo,
    activity_type: ActivityType,
    now: datetime,
    note: Optional[str] = None,
    activity_id: Optional[str] = None,
) -> ActivityResult:
    """Apply ``activity_type`` to ``todo`` at ``now``

    Raises:
        InvalidStateTransitionError: if the current work state forbids it
    """
    activity_type = ActivityType(activity_type)
    previous_state = todo.work_state
    changes = {}
    work_time: Optional[int] = None

    if activity_type == ActivityType.STARTED:
        if previous_state == WorkState.ACTIVE:
            raise InvalidStateTransitionError("Invalid state transition. Todo is already active")
        if previous_state == WorkState.COMPLETED:
            raise InvalidStateTransitionError("Invalid state transition. Cannot start a completed todo")
        work_time = 0
        changes.update(work_state=WorkState.ACTIVE, last_state_change_at=now)
        if todo.status == TodoStatus.PENDING:
            changes["status"] = TodoStatus.IN_PROGRESS

    elif activity_type == ActivityType.PAUSED:
        if previous_state != WorkState.ACTIVE:
            raise InvalidStateTransitionError("Invalid state transition. Can only pause an active todo")
        work_time = elapsed_seconds(todo.last_state_change_at, now)
        changes.update(
            work_state=WorkState.PAUSED,
            total_work_time=todo.total_work_time + work_time,
            last_state_change_at=now,
        )

    elif activity_type == ActivityType.COMPLETED:
        if previous_state == WorkState.COMPLETED:
            raise InvalidStateTransitionError("Invalid state transition. Todo is already completed")
        work_time = 0
        if previous_state == WorkState.ACTIVE:
            work_time = elapsed_seconds(todo.last_state_change_at, now)
        changes.update(
            work_state=WorkState.COMPLETED,
            status=TodoStatus.COMPLETED,
            total_work_time=todo.total_work_time + work_time,
            last_state_change_at=now,
        )

    else:  # discarded
        if previous_state == WorkState.ACTIVE:
            work_time = elapsed_seconds(todo.last_state_change_at, now)
            changes["total_work_time"] = todo.total_work_time + work_time

    activity = TodoActivity(
        id=activity_id or str(uuid.uuid4()),
        todo_id=todo.id,
        type=activity_type,
        previous_state=previous_state,
        work_time=work_time,
        note=note,
        created_at=now,
    )
    return ActivityResult(todo=replace(todo, updated_at=now, **changes), activity=activity)


def reopen(todo: Todo, now: datetime) -> Todo:
    """Return a completed todo to ``pending``/``idle``, keeping its work time"""
    if todo.status != TodoStatus.COMPLETED:
        raise InvalidStateTransitionError("Invalid state transition. Todo is not completed")
    return replace(
        todo,
        status=TodoStatus.PENDING,
        work_state=WorkState.IDLE,
        last_state_change_at=now,
        updated_at=now,
    )


def format_work_time(seconds: int) -> str:
    """Render seconds as e.g. ``"2 hours, 30 minutes, 15 seconds"``"""
    if seconds <= 0:
        return "0 seconds"
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    for value, unit in ((hours, "hour"), (minutes, "minute"), (secs, "second")):
        if value:
            parts.append(f"{value} {unit}{'' if value == 1 else 's'}")
    return ", ".join(parts)
