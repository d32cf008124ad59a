"""Tag DTOs"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class TagMatchMode(str, Enum):
    """How a multi-tag filter combines its tags"""
    ALL = "all"
    ANY = "any"


class TagCreateDTO(BaseModel):
    """DTO for creating a tag"""
    name: str = Field(min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)


class TagUpdateDTO(BaseModel):
    """DTO for updating a tag"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)


class TagResponseDTO(BaseModel):
    """DTO for tag response"""
    id: str
    name: str
    color: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TagStatisticsDTO(BaseModel):
    """DTO for tag usage counts"""
    id: str
    name: str
    color: Optional[str] = None
    usage_count: int
    pending_todo_count: int
    completed_todo_count: int


class BulkTagOperationDTO(BaseModel):
    """DTO for attaching or detaching one tag on many todos"""
    todo_ids: List[str]


class BulkTagOperationResultDTO(BaseModel):
    """DTO for the outcome of a bulk tag operation"""
    tag: TagResponseDTO
    affected_count: int
