"""Todos API router"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from datetime import datetime
from typing import List, Optional
from worktrack.application.dto.todo_dto import (
    BulkDueDateUpdateDTO,
    TodoCreateDTO,
    TodoUpdateDTO,
    TodoResponseDTO,
    TodoWorkTimeDTO,
)
from worktrack.application.use_cases.todo_use_cases import TodoUseCases
from worktrack.application.dto.tag_dto import TagMatchMode
from worktrack.application.use_cases.tag_use_cases import TagUseCases
from worktrack.domain.entities.todo import TodoStatus
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_tag_use_cases, get_todo_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/todos", tags=["todos"], redirect_slashes=False)


@router.post("/", response_model=TodoResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_todo(
    todo_data: TodoCreateDTO,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Create a new todo, optionally under an existing parent"""
    try:
        return await use_cases.create_todo(todo_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[TodoResponseDTO])
async def get_all_todos(
    status: Optional[TodoStatus] = None,
    project_id: Optional[str] = None,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Get all todos, optionally filtered by status and project"""
    return await use_cases.get_all_todos(
        status=status.value if status else None,
        project_id=project_id,
    )


@router.get("/overdue", response_model=List[TodoResponseDTO])
async def get_overdue_todos(use_cases: TodoUseCases = Depends(get_todo_use_cases)):
    """Get open todos past their due date"""
    return await use_cases.get_overdue_todos()


@router.get("/due-soon", response_model=List[TodoResponseDTO])
async def get_due_soon_todos(
    days: Optional[int] = Query(default=None, ge=0),
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Get open todos due within the next ``days`` days"""
    return await use_cases.get_due_soon_todos(days=days)


@router.get("/by-due-date", response_model=List[TodoResponseDTO])
async def get_todos_by_due_date(
    start: datetime,
    end: datetime,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Get todos due between ``start`` and ``end`` inclusive"""
    return await use_cases.get_todos_by_due_date_range(start, end)


@router.post("/bulk-due-date", response_model=List[TodoResponseDTO])
async def bulk_update_due_date(
    update_data: BulkDueDateUpdateDTO,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Set or clear the due date of several todos"""
    return await use_cases.bulk_update_due_date(update_data)


@router.get("/by-tags", response_model=List[TodoResponseDTO])
async def get_todos_by_tags(
    tag_ids: List[str] = Query(default=[]),
    mode: TagMatchMode = TagMatchMode.ALL,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Get todos carrying all (or any) of the given tags"""
    try:
        return await use_cases.get_todos_by_tags(tag_ids, mode)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}", response_model=TodoResponseDTO)
async def get_todo(
    todo_id: str,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Get todo by ID"""
    todo = await use_cases.get_todo(todo_id)
    if not todo:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return todo


@router.put("/{todo_id}", response_model=TodoResponseDTO)
async def update_todo(
    todo_id: str,
    todo_data: TodoUpdateDTO,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Update title, description, priority, due date or project"""
    try:
        return await use_cases.update_todo(todo_id, todo_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    todo_id: str,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Delete todo; its subtasks are detached, its edges and activities removed"""
    deleted = await use_cases.delete_todo(todo_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Todo not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{todo_id}/reopen", response_model=TodoResponseDTO)
async def reopen_todo(
    todo_id: str,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Reopen a completed todo"""
    try:
        return await use_cases.reopen_todo(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/work-time", response_model=TodoWorkTimeDTO)
async def get_work_time(
    todo_id: str,
    use_cases: TodoUseCases = Depends(get_todo_use_cases),
):
    """Get accumulated work time in seconds and as text"""
    try:
        return await use_cases.get_work_time(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{todo_id}/tags/{tag_id}", response_model=TodoResponseDTO)
async def add_tag(
    todo_id: str,
    tag_id: str,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Attach a tag to a todo"""
    try:
        return await use_cases.add_tag_to_todo(tag_id, todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}/tags/{tag_id}", response_model=TodoResponseDTO)
async def remove_tag(
    todo_id: str,
    tag_id: str,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Detach a tag from a todo"""
    try:
        return await use_cases.remove_tag_from_todo(tag_id, todo_id)
    except DomainError as e:
        raise to_http_exception(e)
