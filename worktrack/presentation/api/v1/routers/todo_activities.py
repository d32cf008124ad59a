"""Todo activities API router"""
from fastapi import APIRouter, Depends, Response, status
from typing import List
from worktrack.application.dto.todo_activity_dto import (
    TodoActivityCreateDTO,
    TodoActivityResponseDTO,
)
from worktrack.application.use_cases.todo_activity_use_cases import TodoActivityUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_activity_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/todos", tags=["todo activities"], redirect_slashes=False)


@router.post(
    "/{todo_id}/activities",
    response_model=TodoActivityResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def record_activity(
    todo_id: str,
    activity_data: TodoActivityCreateDTO,
    use_cases: TodoActivityUseCases = Depends(get_activity_use_cases),
):
    """Record started, paused, completed or discarded work on a todo

    Returns 400 when the todo's current work state does not allow it.
    """
    try:
        return await use_cases.record_activity(todo_id, activity_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/activities", response_model=List[TodoActivityResponseDTO])
async def get_activities(
    todo_id: str,
    use_cases: TodoActivityUseCases = Depends(get_activity_use_cases),
):
    """Get the activity history of a todo, newest first"""
    try:
        return await use_cases.get_activities(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    todo_id: str,
    activity_id: str,
    use_cases: TodoActivityUseCases = Depends(get_activity_use_cases),
):
    try:
        await use_cases.delete_activity(todo_id, activity_id)
    except DomainError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
