"""SQLAlchemy implementation of TodoActivityRepository"""
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from worktrack.domain.entities.todo import Todo, WorkState
from worktrack.domain.entities.todo_activity import ActivityType, TodoActivity
from worktrack.domain.errors import TodoActivityNotFoundError, TodoNotFoundError
from worktrack.domain.repositories.todo_activity_repository import TodoActivityRepository
from worktrack.infrastructure.database.models import TodoActivityModel, TodoModel
from worktrack.infrastructure.repositories.todo_repository_db import copy_todo_fields


class TodoActivityRepositoryDB(TodoActivityRepository):
    """SQLAlchemy implementation of TodoActivityRepository"""

    def __init__(self, db: Session):
        self.db = db

    def _activity_model_to_entity(self, model: TodoActivityModel) -> TodoActivity:
        """Convert TodoActivityModel to TodoActivity entity"""
        return TodoActivity(
            id=str(model.id),
            todo_id=str(model.todo_id),
            type=ActivityType(model.type),
            previous_state=WorkState(model.previous_state),
            work_time=model.work_time,
            note=model.note,
            work_period_id=str(model.work_period_id) if model.work_period_id else None,
            created_at=model.created_at,
        )

    def _activity_entity_to_model(self, activity: TodoActivity) -> TodoActivityModel:
        return TodoActivityModel(
            id=activity.id if activity.id else None,
            todo_id=activity.todo_id,
            type=activity.type.value,
            work_time=activity.work_time,
            previous_state=activity.previous_state.value,
            note=activity.note,
            work_period_id=activity.work_period_id,
            created_at=activity.created_at,
        )

    async def record(self, todo: Todo, activity: TodoActivity) -> TodoActivity:
        """Store the todo's new work state and the activity in a single commit"""
        todo_model = self.db.query(TodoModel).filter(TodoModel.id == todo.id).first()
        if not todo_model:
            raise TodoNotFoundError(todo.id)

        copy_todo_fields(todo_model, todo)
        activity_model = self._activity_entity_to_model(activity)
        self.db.add(activity_model)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(activity_model)

        return self._activity_model_to_entity(activity_model)

    async def get_by_id(self, activity_id: str) -> Optional[TodoActivity]:
        """Get activity by ID"""
        activity_model = self.db.query(TodoActivityModel).filter(TodoActivityModel.id == activity_id).first()
        if not activity_model:
            return None
        return self._activity_model_to_entity(activity_model)

    async def get_by_todo_id(self, todo_id: str) -> List[TodoActivity]:
        """Get activities of a todo, newest first"""
        activity_models = (
            self.db.query(TodoActivityModel)
            .filter(TodoActivityModel.todo_id == todo_id)
            .order_by(TodoActivityModel.created_at.desc())
            .all()
        )
        return [self._activity_model_to_entity(model) for model in activity_models]

    async def get_by_work_period_ids(self, work_period_ids: List[str]) -> List[TodoActivity]:
        """Get activities linked to any of the given work periods"""
        if not work_period_ids:
            return []
        activity_models = (
            self.db.query(TodoActivityModel)
            .filter(TodoActivityModel.work_period_id.in_(list(work_period_ids)))
            .order_by(TodoActivityModel.created_at)
            .all()
        )
        return [self._activity_model_to_entity(model) for model in activity_models]

    async def update_work_period(self, activity_id: str, work_period_id: Optional[str]) -> TodoActivity:
        """Set or clear the activity's work period"""
        activity_model = self.db.query(TodoActivityModel).filter(TodoActivityModel.id == activity_id).first()
        if not activity_model:
            raise TodoActivityNotFoundError(activity_id)

        activity_model.work_period_id = work_period_id
        self.db.commit()
        self.db.refresh(activity_model)
        return self._activity_model_to_entity(activity_model)

    async def delete(self, activity_id: str) -> bool:
        """Delete activity permanently"""
        activity_model = self.db.query(TodoActivityModel).filter(TodoActivityModel.id == activity_id).first()
        if not activity_model:
            return False

        self.db.delete(activity_model)
        self.db.commit()
        return True
