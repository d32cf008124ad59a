"""Tag repository interface"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from worktrack.domain.entities.tag import Tag, TagUsage


class TagRepository(ABC):
    """Interface for tag repository"""

    @abstractmethod
    async def create(self, tag: Tag) -> Tag:
        """Create a tag; a taken name raises ``TagExistsError``"""
        pass

    @abstractmethod
    async def get_by_id(self, tag_id: str) -> Optional[Tag]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Tag]:
        pass

    @abstractmethod
    async def get_all(self) -> List[Tag]:
        pass

    @abstractmethod
    async def update(self, tag: Tag) -> Tag:
        pass

    @abstractmethod
    async def delete(self, tag_id: str) -> bool:
        pass

    @abstractmethod
    async def get_usage_statistics(self) -> List[TagUsage]:
        """Get usage counts for every tag"""
        pass

    @abstractmethod
    async def get_tag_ids_for_todo(self, todo_id: str) -> List[str]:
        """Get IDs of the tags attached to a todo"""
        pass

    @abstractmethod
    async def get_tag_ids_for_todos(self, todo_ids: Sequence[str]) -> Dict[str, List[str]]:
        """Get tag IDs keyed by todo ID; todos without tags map to ``[]``"""
        pass

    @abstractmethod
    async def add_to_todo(self, tag_id: str, todo_id: str) -> None:
        pass

    @abstractmethod
    async def remove_from_todo(self, tag_id: str, todo_id: str) -> bool:
        pass

    @abstractmethod
    async def get_todo_ids_with_all_tags(self, tag_ids: Sequence[str]) -> List[str]:
        """Get IDs of todos carrying every one of ``tag_ids``"""
        pass

    @abstractmethod
    async def get_todo_ids_with_any_tag(self, tag_ids: Sequence[str]) -> List[str]:
        """Get IDs of todos carrying at least one of ``tag_ids``"""
        pass

    @abstractmethod
    async def bulk_add_to_todos(self, tag_id: str, todo_ids: Sequence[str]) -> int:
        """Attach a tag to many todos in one commit; returns how many links were new"""
        pass

    @abstractmethod
    async def bulk_remove_from_todos(self, tag_id: str, todo_ids: Sequence[str]) -> int:
        """Detach a tag from many todos in one commit; returns how many links went"""
        pass
