"""Project DTOs"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from worktrack.application.dto.todo_dto import TodoResponseDTO
from worktrack.domain.entities.project import ProjectStatus


class ProjectCreateDTO(BaseModel):
    """DTO for creating a project"""
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdateDTO(BaseModel):
    """DTO for updating a project"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, max_length=20)
    status: Optional[ProjectStatus] = None


class ProjectResponseDTO(BaseModel):
    """DTO for project response"""
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectWithTodosDTO(BaseModel):
    """DTO for a project together with its todos"""
    project: ProjectResponseDTO
    todos: List[TodoResponseDTO] = []
