"""Project use cases"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from worktrack.application.dto.project_dto import (
    ProjectCreateDTO,
    ProjectResponseDTO,
    ProjectUpdateDTO,
    ProjectWithTodosDTO,
)
from worktrack.application.dto.todo_dto import TodoResponseDTO
from worktrack.application.use_cases.todo_use_cases import todo_to_dto
from worktrack.domain.entities.project import Project, ProjectStatus
from worktrack.domain.entities.todo import Todo
from worktrack.domain.errors import (
    ProjectNameExistsError,
    ProjectNotFoundError,
    TodoNotFoundError,
    TodoNotInProjectError,
)
from worktrack.domain.repositories.project_repository import ProjectRepository
from worktrack.domain.repositories.todo_repository import TodoRepository

logger = logging.getLogger(__name__)


def project_to_dto(project: Project) -> ProjectResponseDTO:
    """Convert Project entity to ProjectResponseDTO"""
    return ProjectResponseDTO(
        id=project.id,
        name=project.name,
        description=project.description,
        color=project.color,
        status=project.status,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


class ProjectUseCases:
    """Use cases for projects and the todos assigned to them"""

    def __init__(self, project_repository: ProjectRepository, todo_repository: TodoRepository):
        self.project_repository = project_repository
        self.todo_repository = todo_repository

    async def _get_or_raise(self, project_id: str) -> Project:
        project = await self.project_repository.get_by_id(project_id)
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    async def _get_todo_or_raise(self, todo_id: str) -> Todo:
        todo = await self.todo_repository.get_by_id(todo_id)
        if not todo:
            raise TodoNotFoundError(todo_id)
        return todo

    async def create_project(self, project_data: ProjectCreateDTO) -> ProjectResponseDTO:
        """Create a project with a unique name"""
        if await self.project_repository.get_by_name(project_data.name):
            logger.warning("Rejected duplicate project name %r", project_data.name)
            raise ProjectNameExistsError(project_data.name)

        project = await self.project_repository.create(
            Project(
                id=str(uuid.uuid4()),
                name=project_data.name,
                description=project_data.description,
                color=project_data.color,
                status=project_data.status,
            )
        )
        logger.info("Created project %s (%s)", project.id, project.name)
        return project_to_dto(project)

    async def get_project(self, project_id: str) -> Optional[ProjectResponseDTO]:
        project = await self.project_repository.get_by_id(project_id)
        return project_to_dto(project) if project else None

    async def get_all_projects(self) -> List[ProjectResponseDTO]:
        return [project_to_dto(project) for project in await self.project_repository.get_all()]

    async def update_project(self, project_id: str, project_data: ProjectUpdateDTO) -> ProjectResponseDTO:
        """Update only the given fields; a new name must still be unique"""
        project = await self._get_or_raise(project_id)

        if project_data.name is not None and project_data.name != project.name:
            other = await self.project_repository.get_by_name(project_data.name)
            if other and other.id != project_id:
                logger.warning("Rejected rename of project %s to taken name %r", project_id, project_data.name)
                raise ProjectNameExistsError(project_data.name)
            project.name = project_data.name
        if project_data.description is not None:
            project.description = project_data.description
        if project_data.color is not None:
            project.color = project_data.color
        project.updated_at = datetime.utcnow()
        if project_data.status == ProjectStatus.ARCHIVED:
            project.archive()
        elif project_data.status == ProjectStatus.ACTIVE:
            project.activate()

        updated = await self.project_repository.update(project)
        logger.info("Updated project %s", project_id)
        return project_to_dto(updated)

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project; its todos stay and lose the link"""
        deleted = await self.project_repository.delete(project_id)
        if deleted:
            logger.info("Deleted project %s", project_id)
        return deleted

    async def add_todo_to_project(self, project_id: str, todo_id: str) -> TodoResponseDTO:
        """Assign a todo to a project, moving it out of any previous one"""
        await self._get_or_raise(project_id)
        todo = await self._get_todo_or_raise(todo_id)
        todo.project_id = project_id
        todo.updated_at = datetime.utcnow()
        updated = await self.todo_repository.update(todo)
        logger.info("Added todo %s to project %s", todo_id, project_id)
        return todo_to_dto(updated)

    async def remove_todo_from_project(self, project_id: str, todo_id: str) -> TodoResponseDTO:
        await self._get_or_raise(project_id)
        todo = await self._get_todo_or_raise(todo_id)
        if todo.project_id != project_id:
            raise TodoNotInProjectError(todo_id, project_id)
        todo.project_id = None
        todo.updated_at = datetime.utcnow()
        updated = await self.todo_repository.update(todo)
        logger.info("Removed todo %s from project %s", todo_id, project_id)
        return todo_to_dto(updated)

    async def get_todos_by_project(self, project_id: str) -> ProjectWithTodosDTO:
        project = await self._get_or_raise(project_id)
        todos = await self.todo_repository.get_all(project_id=project_id)
        return ProjectWithTodosDTO(
            project=project_to_dto(project),
            todos=[todo_to_dto(todo) for todo in todos],
        )
