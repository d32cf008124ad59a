"""Work period DTOs"""
from datetime import date as date_type, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from worktrack.domain.timestamps import to_naive_utc


class WorkPeriodCreateDTO(BaseModel):
    """DTO for creating a work period

    ``date`` defaults to the calendar day of ``start_time``.
    """
    name: str = Field(min_length=1, max_length=255)
    date: Optional[date_type] = None
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class WorkPeriodUpdateDTO(BaseModel):
    """DTO for updating a work period"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    date: Optional[date_type] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class WorkPeriodResponseDTO(BaseModel):
    """DTO for work period response"""
    id: str
    name: str
    date: date_type
    start_time: datetime
    end_time: datetime
    duration_seconds: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkPeriodStatisticsQueryDTO(BaseModel):
    """DTO for statistics filters; omitted fields do not restrict"""
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    work_period_ids: Optional[List[str]] = None
    todo_ids: Optional[List[str]] = None
    tag_ids: Optional[List[str]] = None


class WorkPeriodStatisticsDTO(BaseModel):
    """DTO for statistics response; times in seconds"""
    total_work_period_time: int
    total_activity_time: int
    utilization_rate: float
    activities_by_todo: Dict[str, int] = {}
    activities_by_tag: Dict[str, int] = {}

    model_config = {"from_attributes": True}
