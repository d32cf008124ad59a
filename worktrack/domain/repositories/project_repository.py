"""Project repository interface"""
from abc import ABC, abstractmethod
from typing import List, Optional
from worktrack.domain.entities.project import Project


class ProjectRepository(ABC):
    """Interface for project repository"""

    @abstractmethod
    async def create(self, project: Project) -> Project:
        """Create a project; a taken name raises ``ProjectNameExistsError``"""
        pass

    @abstractmethod
    async def get_by_id(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Project]:
        pass

    @abstractmethod
    async def get_all(self) -> List[Project]:
        pass

    @abstractmethod
    async def update(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def delete(self, project_id: str) -> bool:
        """Delete a project; its todos stay and lose the link"""
        pass
