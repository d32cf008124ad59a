"""Work periods API router"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
from worktrack.application.dto.todo_activity_dto import TodoActivityResponseDTO
from worktrack.application.dto.work_period_dto import (
    WorkPeriodCreateDTO,
    WorkPeriodUpdateDTO,
    WorkPeriodResponseDTO,
    WorkPeriodStatisticsDTO,
    WorkPeriodStatisticsQueryDTO,
)
from worktrack.application.use_cases.work_period_use_cases import WorkPeriodUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_work_period_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/work-periods", tags=["work periods"], redirect_slashes=False)


@router.post("/", response_model=WorkPeriodResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_work_period(
    period_data: WorkPeriodCreateDTO,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Create a work period

    Returns 400 for an empty or inverted interval and 409 when it overlaps
    another period on the same date.
    """
    try:
        return await use_cases.create_period(period_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[WorkPeriodResponseDTO])
async def get_work_periods(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Get work periods, optionally within an inclusive date range"""
    return await use_cases.list_periods(start_date=start_date, end_date=end_date)


@router.get("/statistics", response_model=WorkPeriodStatisticsDTO)
async def get_statistics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    work_period_ids: Optional[List[str]] = Query(default=None),
    todo_ids: Optional[List[str]] = Query(default=None),
    tag_ids: Optional[List[str]] = Query(default=None),
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Tracked activity time against scheduled period time, in seconds"""
    query = WorkPeriodStatisticsQueryDTO(
        start_date=start_date,
        end_date=end_date,
        work_period_ids=work_period_ids,
        todo_ids=todo_ids,
        tag_ids=tag_ids,
    )
    return await use_cases.get_statistics(query)


@router.delete("/activities/{activity_id}", response_model=TodoActivityResponseDTO)
async def dissociate_activity(
    activity_id: str,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Remove an activity from whatever work period it is linked to"""
    try:
        return await use_cases.dissociate_activity(activity_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{period_id}", response_model=WorkPeriodResponseDTO)
async def get_work_period(
    period_id: str,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Get work period by ID"""
    period = await use_cases.get_period(period_id)
    if not period:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Work period not found",
        )
    return period


@router.put("/{period_id}", response_model=WorkPeriodResponseDTO)
async def update_work_period(
    period_id: str,
    period_data: WorkPeriodUpdateDTO,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Rename, move or resize a work period"""
    try:
        return await use_cases.update_period(period_id, period_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_work_period(
    period_id: str,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Delete a work period; linked activities are kept"""
    deleted = await use_cases.delete_period(period_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Work period not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{period_id}/activities/{activity_id}", response_model=TodoActivityResponseDTO)
async def associate_activity(
    period_id: str,
    activity_id: str,
    use_cases: WorkPeriodUseCases = Depends(get_work_period_use_cases),
):
    """Link an activity to a work period"""
    try:
        return await use_cases.associate_activity(period_id, activity_id)
    except DomainError as e:
        raise to_http_exception(e)
