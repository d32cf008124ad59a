"""Todo activity use cases"""
import logging
from datetime import datetime
from typing import List, Optional

from worktrack.application.dto.todo_activity_dto import (
    TodoActivityCreateDTO,
    TodoActivityResponseDTO,
)
from worktrack.domain.entities.todo_activity import STATE_CHANGING_TYPES, TodoActivity
from worktrack.domain.errors import (
    InvalidStateTransitionError,
    TodoActivityNotFoundError,
    TodoNotFoundError,
    UnauthorizedActivityDeletionError,
)
from worktrack.domain.repositories.todo_activity_repository import TodoActivityRepository
from worktrack.domain.repositories.todo_repository import TodoRepository
from worktrack.domain.services import work_state_machine

logger = logging.getLogger(__name__)


def activity_to_dto(activity: TodoActivity) -> TodoActivityResponseDTO:
    """Convert TodoActivity entity to TodoActivityResponseDTO"""
    return TodoActivityResponseDTO(
        id=activity.id,
        todo_id=activity.todo_id,
        type=activity.type,
        work_time=activity.work_time,
        previous_state=activity.previous_state,
        note=activity.note,
        work_period_id=activity.work_period_id,
        created_at=activity.created_at,
    )


class TodoActivityUseCases:
    """Use cases for recording and managing work activities"""

    def __init__(self, todo_repository: TodoRepository, activity_repository: TodoActivityRepository):
        self.todo_repository = todo_repository
        self.activity_repository = activity_repository

    async def record_activity(
        self,
        todo_id: str,
        activity_data: TodoActivityCreateDTO,
        now: Optional[datetime] = None,
    ) -> TodoActivityResponseDTO:
        """Record a work activity and advance the todo's work state"""
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            raise TodoNotFoundError(todo_id)

        try:
            result = work_state_machine.record_activity(
                todo, activity_data.type, now or datetime.utcnow(), note=activity_data.note
            )
        except InvalidStateTransitionError as e:
            logger.warning("Rejected %s activity on todo %s: %s", activity_data.type.value, todo_id, e)
            raise

        activity = await self.activity_repository.record(result.todo, result.activity)
        logger.info(
            "Recorded %s on todo %s (%s -> %s, +%ss)",
            activity.type.value,
            todo_id,
            activity.previous_state.value,
            result.todo.work_state.value,
            activity.work_time or 0,
        )
        return activity_to_dto(activity)

    async def get_activities(self, todo_id: str) -> List[TodoActivityResponseDTO]:
        """Get activities of a todo, newest first"""
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            raise TodoNotFoundError(todo_id)
        activities = await self.activity_repository.get_by_todo_id(todo_id)
        return [activity_to_dto(activity) for activity in activities]

    async def delete_activity(self, todo_id: str, activity_id: str) -> None:
        """Delete an activity that does not carry booked time

        Activities with booked work time, and the latest activity of each
        state-changing type, back the todo's current totals and cannot go.
        """
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            raise TodoNotFoundError(todo_id)

        activity = await self.activity_repository.get_by_id(activity_id)
        if not activity:
            raise TodoActivityNotFoundError(activity_id)

        if activity.todo_id != todo_id:
            raise UnauthorizedActivityDeletionError(activity_id, "Activity does not belong to this todo")

        if activity.work_time and activity.work_time > 0:
            raise UnauthorizedActivityDeletionError(
                activity_id, "Deleting it would change the recorded work time"
            )

        if activity.type in STATE_CHANGING_TYPES:
            activities = await self.activity_repository.get_by_todo_id(todo_id)
            latest_of_type = next((a for a in activities if a.type == activity.type), None)
            if latest_of_type is not None and latest_of_type.id == activity_id:
                raise UnauthorizedActivityDeletionError(
                    activity_id, "It is the most recent state-changing activity of its type"
                )

        await self.activity_repository.delete(activity_id)
        logger.info("Deleted activity %s of todo %s", activity_id, todo_id)
