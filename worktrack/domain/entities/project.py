"""Project domain entity"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ProjectStatus(str, Enum):
    """Project status"""
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclass
class Project:
    """Project domain entity

    Todos point at their project through ``Todo.project_id``; a project holds
    no list of its own.
    """
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at

    def archive(self) -> None:
        self.status = ProjectStatus.ARCHIVED
        self.updated_at = datetime.utcnow()

    def activate(self) -> None:
        self.status = ProjectStatus.ACTIVE
        self.updated_at = datetime.utcnow()
