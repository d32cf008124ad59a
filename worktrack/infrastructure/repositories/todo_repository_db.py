"""SQLAlchemy implementation of TodoRepository"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from worktrack.domain.entities.todo import PriorityLevel, Todo, TodoStatus, WorkState
from worktrack.domain.errors import TodoNotFoundError
from worktrack.domain.repositories.todo_repository import TodoRepository
from worktrack.infrastructure.database.models import (
    TodoActivityModel, TodoDependencyModel, TodoModel, TodoTagModel,
)
from worktrack.infrastructure.repositories.locking import RelationLockMixin


def copy_todo_fields(todo_model: TodoModel, todo: Todo) -> None:
    """Write the scalar fields and work state of ``todo`` onto its row"""
    todo_model.title = todo.title
    todo_model.description = todo.description
    todo_model.status = todo.status.value
    todo_model.work_state = todo.work_state.value
    todo_model.total_work_time = todo.total_work_time
    todo_model.last_state_change_at = todo.last_state_change_at
    todo_model.priority = todo.priority.value
    todo_model.due_date = todo.due_date
    todo_model.project_id = todo.project_id
    todo_model.updated_at = todo.updated_at


class TodoRepositoryDB(RelationLockMixin, TodoRepository):
    """SQLAlchemy implementation of TodoRepository"""

    def __init__(self, db: Session):
        self.db = db

    def _todo_model_to_entity(self, model: TodoModel) -> Todo:
        """Convert TodoModel to Todo entity"""
        dependency_ids = [
            edge.dependency_id
            for edge in self.db.query(TodoDependencyModel).filter(TodoDependencyModel.todo_id == model.id).all()
        ]
        dependent_ids = [
            edge.todo_id
            for edge in self.db.query(TodoDependencyModel).filter(TodoDependencyModel.dependency_id == model.id).all()
        ]
        tag_ids = [
            link.tag_id
            for link in self.db.query(TodoTagModel).filter(TodoTagModel.todo_id == model.id).all()
        ]

        return Todo(
            id=str(model.id),
            title=model.title,
            description=model.description,
            status=TodoStatus(model.status),
            work_state=WorkState(model.work_state),
            total_work_time=model.total_work_time or 0,
            last_state_change_at=model.last_state_change_at,
            priority=PriorityLevel(model.priority),
            due_date=model.due_date,
            parent_id=str(model.parent_id) if model.parent_id else None,
            project_id=model.project_id,
            dependency_ids=sorted(dependency_ids),
            dependent_ids=sorted(dependent_ids),
            tag_ids=sorted(tag_ids),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _get_model(self, todo_id: str) -> TodoModel:
        todo_model = self.db.query(TodoModel).filter(TodoModel.id == todo_id).first()
        if not todo_model:
            raise TodoNotFoundError(todo_id)
        return todo_model

    async def create(self, todo: Todo) -> Todo:
        """Create a new todo"""
        todo_model = TodoModel(
            id=todo.id if todo.id else None,
            title=todo.title,
            description=todo.description,
            status=todo.status.value,
            work_state=todo.work_state.value,
            total_work_time=todo.total_work_time,
            last_state_change_at=todo.last_state_change_at,
            priority=todo.priority.value,
            due_date=todo.due_date,
            parent_id=todo.parent_id,
            project_id=todo.project_id,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )

        self.db.add(todo_model)
        self.db.commit()
        self.db.refresh(todo_model)

        return self._todo_model_to_entity(todo_model)

    async def get_by_id(self, todo_id: str) -> Optional[Todo]:
        """Get todo by ID"""
        todo_model = self.db.query(TodoModel).filter(TodoModel.id == todo_id).first()
        if not todo_model:
            return None
        return self._todo_model_to_entity(todo_model)

    async def get_by_ids(self, todo_ids: List[str]) -> Dict[str, Todo]:
        """Get todos keyed by ID"""
        if not todo_ids:
            return {}
        todo_models = self.db.query(TodoModel).filter(TodoModel.id.in_(list(todo_ids))).all()
        return {str(model.id): self._todo_model_to_entity(model) for model in todo_models}

    async def get_all(self, status: Optional[str] = None, project_id: Optional[str] = None) -> List[Todo]:
        """Get all todos"""
        query = self.db.query(TodoModel)
        if status is not None:
            query = query.filter(TodoModel.status == status)
        if project_id is not None:
            query = query.filter(TodoModel.project_id == project_id)
        todo_models = query.order_by(TodoModel.created_at.desc()).all()
        return [self._todo_model_to_entity(model) for model in todo_models]

    async def update(self, todo: Todo) -> Todo:
        """Update todo

        Hierarchy and dependency links are not touched here; they change only
        through ``set_parent`` and the dependency methods.
        """
        todo_model = self._get_model(todo.id)
        copy_todo_fields(todo_model, todo)
        self.db.commit()
        self.db.refresh(todo_model)
        return self._todo_model_to_entity(todo_model)

    async def update_due_dates(self, todo_ids: List[str], due_date: Optional[datetime]) -> List[Todo]:
        """Set one due date on many todos in one commit; unknown IDs are skipped"""
        if not todo_ids:
            return []
        todo_models = self.db.query(TodoModel).filter(TodoModel.id.in_(list(todo_ids))).all()
        now = datetime.utcnow()
        for todo_model in todo_models:
            todo_model.due_date = due_date
            todo_model.updated_at = now
        self.db.commit()
        by_id = {str(model.id): model for model in todo_models}
        return [
            self._todo_model_to_entity(by_id[todo_id])
            for todo_id in dict.fromkeys(todo_ids)
            if todo_id in by_id
        ]

    async def delete(self, todo_id: str) -> bool:
        """Delete todo permanently

        Subtasks are detached rather than deleted; edges, tag links and
        activities go with the todo.
        """
        todo_model = self.db.query(TodoModel).filter(TodoModel.id == todo_id).first()
        if not todo_model:
            return False

        self.db.query(TodoModel).filter(TodoModel.parent_id == todo_id).update(
            {TodoModel.parent_id: None}, synchronize_session=False
        )
        self.db.query(TodoDependencyModel).filter(
            (TodoDependencyModel.todo_id == todo_id) | (TodoDependencyModel.dependency_id == todo_id)
        ).delete(synchronize_session=False)
        self.db.query(TodoTagModel).filter(TodoTagModel.todo_id == todo_id).delete(synchronize_session=False)
        self.db.query(TodoActivityModel).filter(TodoActivityModel.todo_id == todo_id).delete(
            synchronize_session=False
        )

        self.db.delete(todo_model)
        self.db.commit()
        return True

    async def find_children(self, parent_id: str) -> List[Todo]:
        """Get direct subtasks of a todo"""
        todo_models = (
            self.db.query(TodoModel)
            .filter(TodoModel.parent_id == parent_id)
            .order_by(TodoModel.created_at)
            .all()
        )
        return [self._todo_model_to_entity(model) for model in todo_models]

    async def find_dependencies(self, todo_id: str) -> List[Todo]:
        """Get todos that ``todo_id`` depends on"""
        todo_models = (
            self.db.query(TodoModel)
            .join(TodoDependencyModel, TodoDependencyModel.dependency_id == TodoModel.id)
            .filter(TodoDependencyModel.todo_id == todo_id)
            .order_by(TodoModel.created_at)
            .all()
        )
        return [self._todo_model_to_entity(model) for model in todo_models]

    async def find_dependents(self, todo_id: str) -> List[Todo]:
        """Get todos that depend on ``todo_id``"""
        todo_models = (
            self.db.query(TodoModel)
            .join(TodoDependencyModel, TodoDependencyModel.todo_id == TodoModel.id)
            .filter(TodoDependencyModel.dependency_id == todo_id)
            .order_by(TodoModel.created_at)
            .all()
        )
        return [self._todo_model_to_entity(model) for model in todo_models]

    async def get_parent_links(self) -> Dict[str, Optional[str]]:
        """Get the child -> parent map"""
        rows = self.db.query(TodoModel.id, TodoModel.parent_id).filter(TodoModel.parent_id.isnot(None)).all()
        return {str(child_id): str(parent_id) for child_id, parent_id in rows}

    async def get_dependency_edges(self) -> List[Tuple[str, str]]:
        """Get every dependency edge"""
        rows = self.db.query(TodoDependencyModel.todo_id, TodoDependencyModel.dependency_id).all()
        return [(str(todo_id), str(dependency_id)) for todo_id, dependency_id in rows]

    async def set_parent(self, child_id: str, parent_id: Optional[str]) -> Todo:
        """Point ``child_id`` at ``parent_id``"""
        todo_model = self._get_model(child_id)
        todo_model.parent_id = parent_id
        self.db.commit()
        self.db.refresh(todo_model)
        return self._todo_model_to_entity(todo_model)

    async def add_dependency(self, todo_id: str, dependency_id: str) -> None:
        """Store a dependency edge"""
        self.db.add(TodoDependencyModel(todo_id=todo_id, dependency_id=dependency_id))
        self.db.commit()

    async def remove_dependency(self, todo_id: str, dependency_id: str) -> None:
        """Delete a dependency edge"""
        self.db.query(TodoDependencyModel).filter(
            TodoDependencyModel.todo_id == todo_id,
            TodoDependencyModel.dependency_id == dependency_id,
        ).delete(synchronize_session=False)
        self.db.commit()
