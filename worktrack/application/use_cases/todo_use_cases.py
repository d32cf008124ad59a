"""Todo use cases"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from worktrack.application.dto.todo_dto import (
    BulkDueDateUpdateDTO,
    TodoCreateDTO,
    TodoResponseDTO,
    TodoUpdateDTO,
    TodoWorkTimeDTO,
)
from worktrack.domain.entities.todo import Todo, TodoStatus
from worktrack.domain.errors import (
    InvalidStateTransitionError,
    ProjectNotFoundError,
    TodoNotFoundError,
)
from worktrack.domain.repositories.project_repository import ProjectRepository
from worktrack.domain.repositories.todo_repository import TodoRepository
from worktrack.domain.services import work_state_machine
from worktrack.domain.timestamps import to_naive_utc

logger = logging.getLogger(__name__)


def todo_to_dto(todo: Todo) -> TodoResponseDTO:
    """Convert Todo entity to TodoResponseDTO"""
    return TodoResponseDTO(
        id=todo.id,
        title=todo.title,
        description=todo.description,
        status=todo.status,
        work_state=todo.work_state,
        total_work_time=todo.total_work_time,
        last_state_change_at=todo.last_state_change_at,
        priority=todo.priority,
        due_date=todo.due_date,
        parent_id=todo.parent_id,
        project_id=todo.project_id,
        dependency_ids=list(todo.dependency_ids),
        dependent_ids=list(todo.dependent_ids),
        tag_ids=list(todo.tag_ids),
        created_at=todo.created_at,
        updated_at=todo.updated_at,
    )


class TodoUseCases:
    """Use cases for todo operations"""

    def __init__(
        self,
        todo_repository: TodoRepository,
        project_repository: ProjectRepository,
        due_soon_days: int = 2,
    ):
        self.todo_repository = todo_repository
        self.project_repository = project_repository
        self.due_soon_days = due_soon_days

    async def _get_or_raise(self, todo_id: str) -> Todo:
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            raise TodoNotFoundError(todo_id)
        return todo

    async def _check_project(self, project_id: Optional[str]) -> None:
        if project_id is not None and not await self.project_repository.get_by_id(project_id):
            raise ProjectNotFoundError(project_id)

    async def create_todo(self, todo_data: TodoCreateDTO) -> TodoResponseDTO:
        """Create a new todo

        A new todo has no descendants yet, so placing it under an existing
        parent can never close a cycle.
        """
        if todo_data.parent_id is not None:
            await self._get_or_raise(todo_data.parent_id)
        await self._check_project(todo_data.project_id)

        now = datetime.utcnow()
        todo = Todo(
            id=str(uuid.uuid4()),
            title=todo_data.title,
            description=todo_data.description,
            priority=todo_data.priority,
            due_date=todo_data.due_date,
            parent_id=todo_data.parent_id,
            project_id=todo_data.project_id,
            last_state_change_at=now,
            created_at=now,
            updated_at=now,
        )

        created_todo = await self.todo_repository.create(todo)
        logger.info("Created todo %s", created_todo.id)
        return todo_to_dto(created_todo)

    async def get_todo(self, todo_id: str) -> Optional[TodoResponseDTO]:
        """Get todo by ID"""
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            return None
        return todo_to_dto(todo)

    async def get_all_todos(
        self, status: Optional[str] = None, project_id: Optional[str] = None
    ) -> List[TodoResponseDTO]:
        """Get all todos"""
        todos = await self.todo_repository.get_all(status=status, project_id=project_id)
        return [todo_to_dto(todo) for todo in todos]

    async def update_todo(self, todo_id: str, todo_data: TodoUpdateDTO) -> TodoResponseDTO:
        """Update todo

        Status and work state are not editable here; they move only through
        recorded activities and reopen.
        """
        existing_todo = await self._get_or_raise(todo_id)
        await self._check_project(todo_data.project_id)

        # Update only provided fields
        if todo_data.title is not None:
            existing_todo.title = todo_data.title
        if todo_data.description is not None:
            existing_todo.description = todo_data.description
        if todo_data.priority is not None:
            existing_todo.priority = todo_data.priority
        if todo_data.due_date is not None:
            existing_todo.due_date = todo_data.due_date
        if todo_data.project_id is not None:
            existing_todo.project_id = todo_data.project_id

        existing_todo.updated_at = datetime.utcnow()

        updated_todo = await self.todo_repository.update(existing_todo)
        return todo_to_dto(updated_todo)

    async def delete_todo(self, todo_id: str) -> bool:
        """Delete todo permanently"""
        deleted = await self.todo_repository.delete(todo_id)
        if deleted:
            logger.info("Deleted todo %s", todo_id)
        return deleted

    async def reopen_todo(self, todo_id: str, now: Optional[datetime] = None) -> TodoResponseDTO:
        """Reopen a completed todo"""
        todo = await self._get_or_raise(todo_id)
        try:
            reopened = work_state_machine.reopen(todo, now or datetime.utcnow())
        except InvalidStateTransitionError as e:
            logger.warning("Rejected reopen of todo %s: %s", todo_id, e)
            raise
        updated_todo = await self.todo_repository.update(reopened)
        logger.info("Reopened todo %s", todo_id)
        return todo_to_dto(updated_todo)

    async def get_work_time(self, todo_id: str) -> TodoWorkTimeDTO:
        """Get accumulated work time of a todo"""
        todo = await self._get_or_raise(todo_id)
        return TodoWorkTimeDTO(
            id=todo.id,
            total_work_time=todo.total_work_time,
            work_state=todo.work_state,
            formatted_time=work_state_machine.format_work_time(todo.total_work_time),
        )

    async def get_overdue_todos(self, now: Optional[datetime] = None) -> List[TodoResponseDTO]:
        """Get todos past their due date that are not completed"""
        now = now or datetime.utcnow()
        todos = await self.todo_repository.get_all()
        return [todo_to_dto(todo) for todo in todos if todo.is_overdue(now)]

    async def get_due_soon_todos(
        self, days: Optional[int] = None, now: Optional[datetime] = None
    ) -> List[TodoResponseDTO]:
        """Get open todos due within ``days`` days"""
        now = now or datetime.utcnow()
        days = self.due_soon_days if days is None else days
        todos = await self.todo_repository.get_all()
        return [
            todo_to_dto(todo)
            for todo in todos
            if todo.status != TodoStatus.COMPLETED and todo.is_due_soon(days, now)
        ]

    async def get_todos_by_due_date_range(self, start: datetime, end: datetime) -> List[TodoResponseDTO]:
        """Get todos due within ``[start, end]``, earliest first"""
        start, end = to_naive_utc(start), to_naive_utc(end)
        todos = await self.todo_repository.get_all()
        in_range = [todo for todo in todos if todo.due_date is not None and start <= todo.due_date <= end]
        in_range.sort(key=lambda todo: todo.due_date)
        return [todo_to_dto(todo) for todo in in_range]

    async def bulk_update_due_date(self, update_data: BulkDueDateUpdateDTO) -> List[TodoResponseDTO]:
        """Set or clear the due date of several todos; unknown IDs are skipped"""
        updated = await self.todo_repository.update_due_dates(update_data.todo_ids, update_data.due_date)
        skipped = len(set(update_data.todo_ids)) - len(updated)
        if skipped:
            logger.warning("Bulk due date update skipped %s unknown todo(s)", skipped)
        logger.info("Updated due date of %s todo(s)", len(updated))
        return [todo_to_dto(todo) for todo in updated]
