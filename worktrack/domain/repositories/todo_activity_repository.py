"""Todo activity repository interface"""
from abc import ABC, abstractmethod
from typing import List, Optional
from worktrack.domain.entities.todo import Todo
from worktrack.domain.entities.todo_activity import TodoActivity


class TodoActivityRepository(ABC):
    """Interface for todo activity repository"""

    @abstractmethod
    async def record(self, todo: Todo, activity: TodoActivity) -> TodoActivity:
        """Store the todo's new work state and the activity that caused it

        Both writes land in one transaction; if either fails neither is kept.
        """
        pass

    @abstractmethod
    async def get_by_id(self, activity_id: str) -> Optional[TodoActivity]:
        """Get activity by ID"""
        pass

    @abstractmethod
    async def get_by_todo_id(self, todo_id: str) -> List[TodoActivity]:
        """Get activities of a todo, newest first"""
        pass

    @abstractmethod
    async def get_by_work_period_ids(self, work_period_ids: List[str]) -> List[TodoActivity]:
        """Get activities linked to any of the given work periods"""
        pass

    @abstractmethod
    async def update_work_period(self, activity_id: str, work_period_id: Optional[str]) -> TodoActivity:
        """Set or clear the activity's work period"""
        pass

    @abstractmethod
    async def delete(self, activity_id: str) -> bool:
        """Delete activity permanently"""
        pass
