"""Todo activity DTOs"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from worktrack.domain.entities.todo import WorkState
from worktrack.domain.entities.todo_activity import ActivityType


class TodoActivityCreateDTO(BaseModel):
    """DTO for recording an activity"""
    type: ActivityType
    note: Optional[str] = Field(default=None, max_length=1000)


class TodoActivityResponseDTO(BaseModel):
    """DTO for todo activity response"""
    id: str
    todo_id: str
    type: ActivityType
    work_time: Optional[int] = None
    previous_state: WorkState
    note: Optional[str] = None
    work_period_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
