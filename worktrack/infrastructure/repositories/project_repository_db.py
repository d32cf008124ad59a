"""SQLAlchemy implementation of ProjectRepository"""
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from worktrack.domain.entities.project import Project, ProjectStatus
from worktrack.domain.errors import ProjectNameExistsError, ProjectNotFoundError
from worktrack.domain.repositories.project_repository import ProjectRepository
from worktrack.infrastructure.database.models import ProjectModel, TodoModel


class ProjectRepositoryDB(ProjectRepository):
    """SQLAlchemy implementation of ProjectRepository"""

    def __init__(self, db: Session):
        self.db = db

    def _project_model_to_entity(self, model: ProjectModel) -> Project:
        """Convert ProjectModel to Project entity"""
        return Project(
            id=str(model.id),
            name=model.name,
            description=model.description,
            color=model.color,
            status=ProjectStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _commit_unique_name(self, name: str) -> None:
        # The unique index on name settles races between two writers
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ProjectNameExistsError(name)

    async def create(self, project: Project) -> Project:
        """Create a new project"""
        project_model = ProjectModel(
            id=project.id if project.id else None,
            name=project.name,
            description=project.description,
            color=project.color,
            status=project.status.value,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )

        self.db.add(project_model)
        self._commit_unique_name(project.name)
        self.db.refresh(project_model)

        return self._project_model_to_entity(project_model)

    async def get_by_id(self, project_id: str) -> Optional[Project]:
        """Get project by ID"""
        project_model = self.db.query(ProjectModel).filter(ProjectModel.id == project_id).first()
        return self._project_model_to_entity(project_model) if project_model else None

    async def get_by_name(self, name: str) -> Optional[Project]:
        """Get project by name"""
        project_model = self.db.query(ProjectModel).filter(ProjectModel.name == name).first()
        return self._project_model_to_entity(project_model) if project_model else None

    async def get_all(self) -> List[Project]:
        """Get all projects by name"""
        project_models = self.db.query(ProjectModel).order_by(ProjectModel.name).all()
        return [self._project_model_to_entity(model) for model in project_models]

    async def update(self, project: Project) -> Project:
        """Update project"""
        project_model = self.db.query(ProjectModel).filter(ProjectModel.id == project.id).first()
        if not project_model:
            raise ProjectNotFoundError(project.id)

        project_model.name = project.name
        project_model.description = project.description
        project_model.color = project.color
        project_model.status = project.status.value
        project_model.updated_at = project.updated_at

        self._commit_unique_name(project.name)
        self.db.refresh(project_model)
        return self._project_model_to_entity(project_model)

    async def delete(self, project_id: str) -> bool:
        """Delete project permanently; its todos are detached"""
        project_model = self.db.query(ProjectModel).filter(ProjectModel.id == project_id).first()
        if not project_model:
            return False

        self.db.query(TodoModel).filter(TodoModel.project_id == project_id).update(
            {TodoModel.project_id: None}, synchronize_session=False
        )
        self.db.delete(project_model)
        self.db.commit()
        return True
