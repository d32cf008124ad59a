"""Todo repository interface"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, Dict, List, Optional, Tuple
from worktrack.domain.entities.todo import Todo


class TodoRepository(ABC):
    """Interface for todo repository

    The hierarchy is stored only as ``Todo.parent_id`` and the dependency
    relation only as ``(todo_id, dependency_id)`` edges; children, dependents
    and dependencies are derived lookups.
    """

    @abstractmethod
    async def create(self, todo: Todo) -> Todo:
        """Create a new todo"""
        pass

    @abstractmethod
    async def get_by_id(self, todo_id: str) -> Optional[Todo]:
        """Get todo by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, todo_ids: List[str]) -> Dict[str, Todo]:
        """Get todos keyed by ID; unknown IDs are left out"""
        pass

    @abstractmethod
    async def get_all(self, status: Optional[str] = None, project_id: Optional[str] = None) -> List[Todo]:
        """Get all todos, optionally filtered by status and project"""
        pass

    @abstractmethod
    async def update(self, todo: Todo) -> Todo:
        """Update scalar fields and work state of a todo"""
        pass

    @abstractmethod
    async def update_due_dates(self, todo_ids: List[str], due_date: Optional[datetime]) -> List[Todo]:
        """Set ``due_date`` on every listed todo at once; unknown IDs are skipped"""
        pass

    @abstractmethod
    async def delete(self, todo_id: str) -> bool:
        """Delete todo permanently"""
        pass

    @abstractmethod
    async def find_children(self, parent_id: str) -> List[Todo]:
        """Get direct subtasks of a todo"""
        pass

    @abstractmethod
    async def find_dependencies(self, todo_id: str) -> List[Todo]:
        """Get todos that ``todo_id`` depends on"""
        pass

    @abstractmethod
    async def find_dependents(self, todo_id: str) -> List[Todo]:
        """Get todos that depend on ``todo_id``"""
        pass

    @abstractmethod
    async def get_parent_links(self) -> Dict[str, Optional[str]]:
        """Get the child -> parent map for every todo with a parent"""
        pass

    @abstractmethod
    async def get_dependency_edges(self) -> List[Tuple[str, str]]:
        """Get every ``(todo_id, dependency_id)`` edge"""
        pass

    @abstractmethod
    async def set_parent(self, child_id: str, parent_id: Optional[str]) -> Todo:
        """Point ``child_id`` at ``parent_id`` (``None`` detaches it)"""
        pass

    @abstractmethod
    async def add_dependency(self, todo_id: str, dependency_id: str) -> None:
        """Store a dependency edge"""
        pass

    @abstractmethod
    async def remove_dependency(self, todo_id: str, dependency_id: str) -> None:
        """Delete a dependency edge"""
        pass

    @abstractmethod
    def write_lock(self, scope: str) -> AsyncContextManager[None]:
        """Serialize read-validate-write sequences on ``scope``

        The lock is held until the enclosed write commits, or is released by
        rollback if the block raises.
        """
        pass
