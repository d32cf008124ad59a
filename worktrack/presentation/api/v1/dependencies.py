"""API dependencies"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from worktrack.infrastructure.config.settings import Settings
from worktrack.infrastructure.database.base import get_db
from worktrack.infrastructure.repositories.todo_repository_db import TodoRepositoryDB
from worktrack.infrastructure.repositories.todo_activity_repository_db import TodoActivityRepositoryDB
from worktrack.infrastructure.repositories.work_period_repository_db import WorkPeriodRepositoryDB
from worktrack.infrastructure.repositories.tag_repository_db import TagRepositoryDB
from worktrack.infrastructure.repositories.project_repository_db import ProjectRepositoryDB
from worktrack.application.use_cases.todo_use_cases import TodoUseCases
from worktrack.application.use_cases.todo_activity_use_cases import TodoActivityUseCases
from worktrack.application.use_cases.todo_relation_use_cases import TodoRelationUseCases
from worktrack.application.use_cases.work_period_use_cases import WorkPeriodUseCases
from worktrack.application.use_cases.tag_use_cases import TagUseCases
from worktrack.application.use_cases.project_use_cases import ProjectUseCases


def get_settings(request: Request) -> Settings:
    """Get the settings the application was created with"""
    return request.app.state.settings


def get_todo_repository(db: Session = Depends(get_db)) -> TodoRepositoryDB:
    """Get todo repository instance with database session"""
    return TodoRepositoryDB(db)


def get_activity_repository(db: Session = Depends(get_db)) -> TodoActivityRepositoryDB:
    """Get todo activity repository instance with database session"""
    return TodoActivityRepositoryDB(db)


def get_work_period_repository(db: Session = Depends(get_db)) -> WorkPeriodRepositoryDB:
    """Get work period repository instance with database session"""
    return WorkPeriodRepositoryDB(db)


def get_tag_repository(db: Session = Depends(get_db)) -> TagRepositoryDB:
    """Get tag repository instance with database session"""
    return TagRepositoryDB(db)


def get_project_repository(db: Session = Depends(get_db)) -> ProjectRepositoryDB:
    """Get project repository instance with database session"""
    return ProjectRepositoryDB(db)


def get_todo_use_cases(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TodoUseCases:
    """Get todo use cases instance with database session"""
    return TodoUseCases(
        get_todo_repository(db),
        get_project_repository(db),
        due_soon_days=settings.DUE_SOON_DAYS,
    )


def get_activity_use_cases(db: Session = Depends(get_db)) -> TodoActivityUseCases:
    """Get todo activity use cases instance with database session"""
    return TodoActivityUseCases(get_todo_repository(db), get_activity_repository(db))


def get_relation_use_cases(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TodoRelationUseCases:
    """Get subtask and dependency use cases instance with database session"""
    return TodoRelationUseCases(
        get_todo_repository(db),
        subtask_tree_max_depth=settings.SUBTASK_TREE_MAX_DEPTH,
        dependency_tree_max_depth=settings.DEPENDENCY_TREE_MAX_DEPTH,
    )


def get_work_period_use_cases(db: Session = Depends(get_db)) -> WorkPeriodUseCases:
    """Get work period use cases instance with database session"""
    return WorkPeriodUseCases(
        get_work_period_repository(db),
        get_activity_repository(db),
        get_tag_repository(db),
    )


def get_tag_use_cases(db: Session = Depends(get_db)) -> TagUseCases:
    """Get tag use cases instance with database session"""
    return TagUseCases(get_tag_repository(db), get_todo_repository(db))


def get_project_use_cases(db: Session = Depends(get_db)) -> ProjectUseCases:
    """Get project use cases instance with database session"""
    return ProjectUseCases(get_project_repository(db), get_todo_repository(db))
