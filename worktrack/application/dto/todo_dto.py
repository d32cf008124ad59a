"""Todo DTOs"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from worktrack.domain.entities.todo import PriorityLevel, TodoStatus, WorkState
from worktrack.domain.timestamps import to_naive_utc


class TodoCreateDTO(BaseModel):
    """DTO for creating a todo"""
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    priority: PriorityLevel = PriorityLevel.MEDIUM
    due_date: Optional[datetime] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class TodoUpdateDTO(BaseModel):
    """DTO for updating a todo"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[PriorityLevel] = None
    due_date: Optional[datetime] = None
    project_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class TodoResponseDTO(BaseModel):
    """DTO for todo response"""
    id: str
    title: str
    description: Optional[str] = None
    status: TodoStatus
    work_state: WorkState
    total_work_time: int
    last_state_change_at: datetime
    priority: PriorityLevel
    due_date: Optional[datetime] = None
    parent_id: Optional[str] = None
    project_id: Optional[str] = None
    dependency_ids: List[str] = []
    dependent_ids: List[str] = []
    tag_ids: List[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TodoWorkTimeDTO(BaseModel):
    """DTO for accumulated work time"""
    id: str
    total_work_time: int
    work_state: WorkState
    formatted_time: str


class TodoTreeNodeDTO(BaseModel):
    """DTO for one node of a subtask or dependency tree"""
    id: str
    title: str
    status: TodoStatus
    priority: PriorityLevel
    children: List["TodoTreeNodeDTO"] = []


class SetParentDTO(BaseModel):
    """DTO for moving a todo under a parent"""
    parent_id: str


class AddSubtaskDTO(BaseModel):
    """DTO for attaching an existing todo as a subtask"""
    subtask_id: str


class AddDependencyDTO(BaseModel):
    """DTO for adding a dependency edge"""
    dependency_id: str


class BulkDueDateUpdateDTO(BaseModel):
    """DTO for setting one due date on many todos; ``null`` clears it"""
    todo_ids: List[str] = Field(min_length=1)
    due_date: Optional[datetime] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)
